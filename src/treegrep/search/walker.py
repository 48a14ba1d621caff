"""Depth-bounded directory walk yielding candidate file paths."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from treegrep.core.excludes import matches_any
from treegrep.search.aggregator import ErrorCollector


def dir_depth(root: str, dirpath: str) -> int:
    """Depth of ``dirpath`` below ``root``; the root itself is 0."""
    rel = os.path.relpath(dirpath, root)
    if rel == os.curdir:
        return 0
    return len(Path(rel).parts)


def file_depth(root: str, file_path: str) -> int:
    """Number of directory levels between ``root`` and ``file_path``."""
    return dir_depth(root, os.path.dirname(file_path))


def name_allowed(name: str, name_patterns: Sequence[str]) -> bool:
    return not name_patterns or matches_any(name, name_patterns)


def walk_root(
    root: str,
    max_depth: int,
    name_patterns: Sequence[str],
    errors: ErrorCollector,
) -> Iterator[str]:
    """Yield files under one root. Directories deeper than max_depth are pruned."""
    if os.path.isfile(root):
        if name_allowed(os.path.basename(root), name_patterns):
            yield root
        return

    def on_error(exc: OSError) -> None:
        errors.add(exc.filename or root, "walk", exc)

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        depth = dir_depth(root, dirpath)
        if depth >= max_depth:
            # Children would sit deeper than max_depth
            dirnames.clear()
        else:
            dirnames.sort()
        for name in sorted(filenames):
            if name_allowed(name, name_patterns):
                yield os.path.join(dirpath, name)


def walk(
    roots: Iterable[str],
    max_depth: int,
    name_patterns: Sequence[str],
    errors: ErrorCollector,
) -> Iterator[str]:
    """Lazily yield candidate files for every root, in root order."""
    for root in roots:
        yield from walk_root(root, max_depth, name_patterns, errors)
