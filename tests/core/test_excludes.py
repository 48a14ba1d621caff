"""Tests for core/excludes.py."""

import pytest

from treegrep.core.excludes import (
    DEFAULT_IGNORE_PATTERNS,
    DEFAULT_PRUNABLE_DIRS,
    HARDCODED_DIRS,
    is_hardcoded_dir,
    is_ignored,
    matches_any,
)


class TestTiers:
    def test_tiers_disjoint(self) -> None:
        assert not HARDCODED_DIRS & DEFAULT_PRUNABLE_DIRS

    def test_default_patterns_cover_prunable_dirs(self) -> None:
        assert DEFAULT_PRUNABLE_DIRS <= set(DEFAULT_IGNORE_PATTERNS)

    @pytest.mark.parametrize("name", [".git", ".svn", ".hg", ".bzr"])
    def test_vcs_dirs_hardcoded(self, name: str) -> None:
        assert is_hardcoded_dir(name)

    def test_regular_dir_not_hardcoded(self) -> None:
        assert not is_hardcoded_dir("src")


class TestMatching:
    def test_matches_any_glob(self) -> None:
        assert matches_any("app.min.js", ["*.min.js"])
        assert not matches_any("app.js", ["*.min.js"])

    def test_matches_any_is_case_sensitive(self) -> None:
        assert not matches_any("BUILD", ["build"])

    def test_is_ignored_always_includes_vcs(self) -> None:
        assert is_ignored(".git", [])

    def test_is_ignored_uses_patterns(self) -> None:
        assert is_ignored("node_modules", DEFAULT_IGNORE_PATTERNS)
        assert is_ignored("server.log", DEFAULT_IGNORE_PATTERNS)
        assert not is_ignored("server.py", DEFAULT_IGNORE_PATTERNS)
