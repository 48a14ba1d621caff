"""Default exclude patterns for the content indexer and watcher.

Tier 0 (HARDCODED_DIRS): VCS internals. Skipped by the indexer and watcher
    unless ``skip_vcs_dirs`` is turned off.

Tier 1 (DEFAULT_PRUNABLE_DIRS): dependency, cache and build directories.
    Excluded from the index by default; a config that sets its own
    ``ignore_patterns`` replaces this tier but never Tier 0.

The search walker itself applies no excludes: a plain search visits
everything below its roots, like grep -r.
"""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable

HARDCODED_DIRS: frozenset[str] = frozenset(
    (
        ".git",
        ".svn",
        ".hg",
        ".bzr",
    )
)

DEFAULT_PRUNABLE_DIRS: frozenset[str] = frozenset(
    (
        # JavaScript/Node.js
        "node_modules",
        "bower_components",
        ".next",
        # Python
        "venv",
        ".venv",
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".ruff_cache",
        ".tox",
        # Rust / Go / JVM
        "target",
        ".gradle",
        # Generic build output
        "dist",
        "build",
        # IDE
        ".idea",
        ".vscode",
    )
)

DEFAULT_IGNORE_FILE_GLOBS: tuple[str, ...] = ("*.log", "*.min.js", "*.min.css", "*.map")

DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    *sorted(DEFAULT_PRUNABLE_DIRS),
    *DEFAULT_IGNORE_FILE_GLOBS,
)


def is_hardcoded_dir(dirname: str) -> bool:
    """Check if directory is hardcoded (never indexed, not overridable)."""
    return dirname in HARDCODED_DIRS


def matches_any(name: str, patterns: Iterable[str]) -> bool:
    """Case-sensitive glob match of a base name against any pattern."""
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in patterns)


def is_ignored(name: str, patterns: Iterable[str]) -> bool:
    """Check a base name against Tier 0 and the given ignore patterns."""
    return is_hardcoded_dir(name) or matches_any(name, patterns)
