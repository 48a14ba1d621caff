"""In-memory content index: absolute file path to its full line list.

The index owns its IndexedFile records. Records are immutable, so a record
returned by ``get()`` stays consistent even if the file is re-indexed later.
All map access goes through one lock.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Iterable
from pathlib import Path

import structlog

from treegrep.core.errors import IndexingError
from treegrep.index.models import (
    ContentMatch,
    ContentStats,
    FileFilter,
    IndexedFile,
    IndexStats,
    LineContext,
)
from treegrep.search.matcher import PatternMatcher
from treegrep.search.scanner import read_lines

logger = structlog.get_logger()


def normalize_extension(extension: str) -> str:
    extension = extension.lower()
    if extension and not extension.startswith("."):
        extension = "." + extension
    return extension


def load_indexed_file(path: str | Path) -> IndexedFile:
    """Read and stat one file into an IndexedFile.

    Raises:
        IndexingError: If the file cannot be read.
    """
    abs_path = os.path.abspath(path)
    try:
        st = os.stat(abs_path)
        lines = tuple(read_lines(abs_path))
    except OSError as e:
        raise IndexingError.file_unreadable(abs_path, e.strerror or str(e)) from e
    return IndexedFile(
        path=abs_path,
        lines=lines,
        size=st.st_size,
        modified_at=st.st_mtime,
        extension=os.path.splitext(abs_path)[1].lower(),
        stats=ContentStats.from_lines(lines),
    )


class ContentIndex:
    """Thread-safe map of indexed files with extension, directory and keyword lookups."""

    def __init__(self) -> None:
        self._files: dict[str, IndexedFile] = {}
        self._extensions: dict[str, set[str]] = {}
        self._directories: dict[str, set[str]] = {}
        self._keywords: dict[str, set[str]] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def add_file(self, path: str | Path) -> IndexedFile:
        """Read ``path`` from disk and add or replace it in the index."""
        indexed = load_indexed_file(path)
        self.put(indexed)
        return indexed

    def put(self, indexed: IndexedFile) -> None:
        """Insert a pre-built record, replacing any previous one for the path."""
        with self._lock:
            self._unlink(indexed.path)
            self._files[indexed.path] = indexed
            if indexed.extension:
                self._extensions.setdefault(indexed.extension, set()).add(indexed.path)
            self._directories.setdefault(indexed.directory, set()).add(indexed.path)
            for keyword, paths in self._keywords.items():
                if any(keyword in line for line in indexed.lines):
                    paths.add(indexed.path)
        logger.debug(
            "file_indexed",
            path=indexed.path,
            size=indexed.size,
            lines=indexed.stats.lines,
        )

    def remove_file(self, path: str | Path) -> bool:
        abs_path = os.path.abspath(path)
        with self._lock:
            removed = self._unlink(abs_path)
        if removed:
            logger.debug("file_removed_from_index", path=abs_path)
        return removed

    def _unlink(self, abs_path: str) -> bool:
        old = self._files.pop(abs_path, None)
        if old is None:
            return False
        for mapping, key in (
            (self._extensions, old.extension),
            (self._directories, old.directory),
        ):
            members = mapping.get(key)
            if members is not None:
                members.discard(abs_path)
                if not members:
                    del mapping[key]
        for paths in self._keywords.values():
            paths.discard(abs_path)
        return True

    def clear(self) -> None:
        with self._lock:
            self._files.clear()
            self._extensions.clear()
            self._directories.clear()
            for paths in self._keywords.values():
                paths.clear()

    # ------------------------------------------------------------------
    # Point-in-time reads
    # ------------------------------------------------------------------

    def get(self, path: str | Path) -> IndexedFile | None:
        with self._lock:
            return self._files.get(os.path.abspath(path))

    def paths(self) -> list[str]:
        with self._lock:
            return sorted(self._files)

    def __len__(self) -> int:
        with self._lock:
            return len(self._files)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return self.get(path) is not None

    def _snapshot(self) -> list[IndexedFile]:
        with self._lock:
            return [self._files[p] for p in sorted(self._files)]

    # ------------------------------------------------------------------
    # Content search
    # ------------------------------------------------------------------

    def search_content(
        self,
        pattern: str,
        case_sensitive: bool,
        *,
        is_regex: bool = False,
    ) -> list[ContentMatch]:
        """Find matching lines in every indexed file.

        Raises:
            SearchError: If ``is_regex`` and the pattern does not compile.
        """
        matcher = PatternMatcher.compile(
            pattern, is_regex=is_regex, case_sensitive=case_sensitive
        )
        logger.info(
            "index_search",
            pattern=pattern,
            regex=is_regex,
            case_sensitive=case_sensitive,
        )
        return self.search_matcher(matcher)

    def search_matcher(self, matcher: PatternMatcher) -> list[ContentMatch]:
        """Search with an already compiled matcher. Results are sorted by path."""
        matches: list[ContentMatch] = []
        for indexed in self._snapshot():
            hits = tuple(i for i, line in enumerate(indexed.lines) if matcher.matches(line))
            if hits:
                matches.append(ContentMatch(file_path=indexed.path, line_indices=hits))
        return matches

    def line_contexts(self, path: str | Path, keyword: str, context_lines: int) -> list[LineContext]:
        """Lines of one file containing ``keyword``, each with its surrounding block."""
        indexed = self.get(path)
        if indexed is None:
            return []
        lines = indexed.lines
        contexts: list[LineContext] = []
        for i, line in enumerate(lines):
            if keyword not in line:
                continue
            start = max(i - context_lines, 0)
            end = min(i + context_lines, len(lines) - 1)
            contexts.append(
                LineContext(
                    line=i + 1,
                    content=line,
                    context=lines[start : end + 1],
                    start=start + 1,
                    end=end + 1,
                )
            )
        return contexts

    # ------------------------------------------------------------------
    # Keyword, extension and directory lookups
    # ------------------------------------------------------------------

    def index_keywords(self, keywords: Iterable[str]) -> None:
        """Rebuild the keyword postings for ``keywords`` (replaces previous set)."""
        keywords = list(keywords)
        logger.info("indexing_keywords", keywords=keywords)
        with self._lock:
            self._keywords = {
                keyword: {
                    path
                    for path, indexed in self._files.items()
                    if any(keyword in line for line in indexed.lines)
                }
                for keyword in keywords
            }

    def search_by_keyword(self, keyword: str) -> list[str]:
        """Paths containing ``keyword``. Falls back to a scan if not pre-indexed."""
        with self._lock:
            if keyword in self._keywords:
                return sorted(self._keywords[keyword])
        return [
            indexed.path
            for indexed in self._snapshot()
            if any(keyword in line for line in indexed.lines)
        ]

    def search_by_extension(self, extension: str) -> list[str]:
        with self._lock:
            return sorted(self._extensions.get(normalize_extension(extension), ()))

    def search_by_directory(self, directory: str | Path) -> list[str]:
        with self._lock:
            return sorted(self._directories.get(os.path.abspath(directory), ()))

    def filter_files(self, criteria: FileFilter) -> list[str]:
        """Paths satisfying every set field of ``criteria``."""
        extension = normalize_extension(criteria.extension) if criteria.extension else None
        directory = os.path.abspath(criteria.directory) if criteria.directory else None
        after = criteria.modified_after.timestamp() if criteria.modified_after else None
        before = criteria.modified_before.timestamp() if criteria.modified_before else None

        selected: list[str] = []
        for indexed in self._snapshot():
            if extension is not None and indexed.extension != extension:
                continue
            if directory is not None and indexed.directory != directory:
                continue
            if criteria.min_size is not None and indexed.size < criteria.min_size:
                continue
            if criteria.max_size is not None and indexed.size > criteria.max_size:
                continue
            if after is not None and not indexed.modified_at > after:
                continue
            if before is not None and not indexed.modified_at < before:
                continue
            if criteria.keyword is not None and not any(
                criteria.keyword in line for line in indexed.lines
            ):
                continue
            selected.append(indexed.path)
        return selected

    def stats(self) -> IndexStats:
        with self._lock:
            return IndexStats(
                total_files=len(self._files),
                total_size=sum(f.size for f in self._files.values()),
                total_lines=sum(f.stats.lines for f in self._files.values()),
                extension_counts={ext: len(p) for ext, p in self._extensions.items()},
                directory_counts={d: len(p) for d, p in self._directories.items()},
                keywords_indexed=len(self._keywords),
            )
