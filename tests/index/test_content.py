"""Tests for ContentIndex.

Covers:
- add/replace/remove and the derived lookups
- search_content() literal and regex modes
- line_contexts() blocks
- keyword postings and the scan fallback
- filter_files() criteria
- stats()
"""

from __future__ import annotations

import os
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from treegrep.core.errors import ErrorCode, IndexingError, SearchError
from treegrep.index.content import ContentIndex, load_indexed_file, normalize_extension
from treegrep.index.models import FileFilter


@pytest.fixture
def files(tmp_path: Path) -> Path:
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.py").write_text("import os\n\ndef main():\n    return os.sep\n")
    (tmp_path / "src" / "util.PY").write_text("TODO: tidy\n")
    (tmp_path / "notes.md").write_text("# Notes\nTODO later\nsee main\n")
    (tmp_path / "Makefile").write_text("all:\n\techo hi\n")
    return tmp_path


@pytest.fixture
def index(files: Path) -> ContentIndex:
    idx = ContentIndex()
    for path in sorted(files.rglob("*")):
        if path.is_file():
            idx.add_file(path)
    return idx


class TestNormalizeExtension:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("py", ".py"), (".PY", ".py"), ("", ""), (".md", ".md")],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        assert normalize_extension(raw) == expected


class TestLoadIndexedFile:
    def test_record_fields(self, files: Path) -> None:
        indexed = load_indexed_file(files / "notes.md")

        assert indexed.path == str(files / "notes.md")
        assert indexed.lines == ("# Notes", "TODO later", "see main")
        assert indexed.extension == ".md"
        assert indexed.size == (files / "notes.md").stat().st_size
        assert indexed.stats.lines == 3
        assert indexed.stats.words == 6
        assert indexed.directory == str(files)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(IndexingError) as exc_info:
            load_indexed_file(tmp_path / "missing.txt")

        assert exc_info.value.code == ErrorCode.INDEX_FILE_UNREADABLE


class TestPopulation:
    def test_len_and_contains(self, index: ContentIndex, files: Path) -> None:
        assert len(index) == 4
        assert files / "notes.md" in index
        assert str(files / "notes.md") in index
        assert 42 not in index

    def test_replace_updates_content(self, index: ContentIndex, files: Path) -> None:
        path = files / "notes.md"
        path.write_text("rewritten\n")

        index.add_file(path)

        assert len(index) == 4
        assert index.get(path).lines == ("rewritten",)

    def test_remove(self, index: ContentIndex, files: Path) -> None:
        assert index.remove_file(files / "Makefile") is True
        assert index.remove_file(files / "Makefile") is False
        assert index.get(files / "Makefile") is None
        assert len(index) == 3

    def test_clear(self, index: ContentIndex) -> None:
        index.clear()

        assert len(index) == 0
        assert index.stats().extension_counts == {}

    def test_paths_sorted(self, index: ContentIndex) -> None:
        assert index.paths() == sorted(index.paths())


class TestSearchContent:
    def test_literal(self, index: ContentIndex, files: Path) -> None:
        matches = index.search_content("TODO", case_sensitive=True)

        assert [(m.file_path, m.line_indices) for m in matches] == [
            (str(files / "notes.md"), (1,)),
            (str(files / "src" / "util.PY"), (0,)),
        ]

    def test_case_insensitive(self, index: ContentIndex) -> None:
        matches = index.search_content("todo", case_sensitive=False)

        assert sum(m.count for m in matches) == 2

    def test_regex(self, index: ContentIndex, files: Path) -> None:
        matches = index.search_content(r"^def \w+", case_sensitive=True, is_regex=True)

        assert [(m.file_path, m.line_indices) for m in matches] == [
            (str(files / "src" / "main.py"), (2,)),
        ]

    def test_invalid_regex(self, index: ContentIndex) -> None:
        with pytest.raises(SearchError):
            index.search_content("[", case_sensitive=True, is_regex=True)


class TestLineContexts:
    def test_block_includes_hit_line(self, index: ContentIndex, files: Path) -> None:
        contexts = index.line_contexts(files / "notes.md", "TODO", 1)

        assert len(contexts) == 1
        ctx = contexts[0]
        assert (ctx.line, ctx.start, ctx.end) == (2, 1, 3)
        assert ctx.context == ("# Notes", "TODO later", "see main")

    def test_clipped_at_file_start(self, index: ContentIndex, files: Path) -> None:
        ctx = index.line_contexts(files / "src" / "util.PY", "TODO", 5)[0]

        assert (ctx.start, ctx.end) == (1, 1)

    def test_unknown_path(self, index: ContentIndex, tmp_path: Path) -> None:
        assert index.line_contexts(tmp_path / "nope", "x", 1) == []


class TestLookups:
    def test_by_extension_case_folded(self, index: ContentIndex, files: Path) -> None:
        assert index.search_by_extension("py") == [
            str(files / "src" / "main.py"),
            str(files / "src" / "util.PY"),
        ]

    def test_file_without_extension(self, index: ContentIndex) -> None:
        assert "" not in index.stats().extension_counts

    def test_by_directory(self, index: ContentIndex, files: Path) -> None:
        assert index.search_by_directory(files / "src") == [
            str(files / "src" / "main.py"),
            str(files / "src" / "util.PY"),
        ]

    def test_keyword_postings(self, index: ContentIndex, files: Path) -> None:
        index.index_keywords(["TODO"])

        assert index.search_by_keyword("TODO") == [
            str(files / "notes.md"),
            str(files / "src" / "util.PY"),
        ]
        assert index.stats().keywords_indexed == 1

    def test_keyword_postings_follow_updates(self, index: ContentIndex, files: Path) -> None:
        index.index_keywords(["TODO"])
        (files / "Makefile").write_text("# TODO: targets\n")

        index.add_file(files / "Makefile")
        index.remove_file(files / "notes.md")

        assert index.search_by_keyword("TODO") == [
            str(files / "Makefile"),
            str(files / "src" / "util.PY"),
        ]

    def test_keyword_fallback_scan(self, index: ContentIndex, files: Path) -> None:
        assert index.search_by_keyword("main") == [
            str(files / "notes.md"),
            str(files / "src" / "main.py"),
        ]


class TestFilterFiles:
    def test_no_criteria_selects_all(self, index: ContentIndex) -> None:
        assert index.filter_files(FileFilter()) == index.paths()

    def test_extension_and_keyword(self, index: ContentIndex, files: Path) -> None:
        selected = index.filter_files(FileFilter(extension=".py", keyword="os"))

        assert selected == [str(files / "src" / "main.py")]

    def test_size_bounds(self, index: ContentIndex, files: Path) -> None:
        size = (files / "Makefile").stat().st_size

        selected = index.filter_files(FileFilter(min_size=size, max_size=size))

        assert str(files / "Makefile") in selected
        assert all(index.get(p).size == size for p in selected)

    def test_modified_window(self, index: ContentIndex, files: Path) -> None:
        old = datetime.now() - timedelta(days=2)
        os.utime(files / "Makefile", (old.timestamp(), old.timestamp()))
        index.add_file(files / "Makefile")

        recent = index.filter_files(FileFilter(modified_after=datetime.now() - timedelta(days=1)))
        stale = index.filter_files(FileFilter(modified_before=datetime.now() - timedelta(days=1)))

        assert str(files / "Makefile") not in recent
        assert stale == [str(files / "Makefile")]

    def test_directory(self, index: ContentIndex, files: Path) -> None:
        assert index.filter_files(FileFilter(directory=str(files))) == [
            str(files / "Makefile"),
            str(files / "notes.md"),
        ]


class TestStats:
    def test_totals(self, index: ContentIndex, files: Path) -> None:
        stats = index.stats()

        assert stats.total_files == 4
        assert stats.total_lines == 4 + 1 + 3 + 2
        assert stats.extension_counts == {".py": 2, ".md": 1}
        assert stats.directory_counts == {str(files): 2, str(files / "src"): 2}
        assert stats.to_dict()["total_size"] == stats.total_size
