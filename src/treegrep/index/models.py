"""Content index data types."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class ContentStats:
    """Derived per-file statistics."""

    lines: int
    non_empty_lines: int
    words: int

    @classmethod
    def from_lines(cls, lines: tuple[str, ...]) -> ContentStats:
        return cls(
            lines=len(lines),
            non_empty_lines=sum(1 for line in lines if line.strip()),
            words=sum(len(line.split()) for line in lines),
        )


@dataclass(frozen=True, slots=True)
class IndexedFile:
    """One file held in memory. Immutable once built."""

    path: str  # absolute
    lines: tuple[str, ...]
    size: int
    modified_at: float
    extension: str  # lowercased, with dot; "" if none
    stats: ContentStats

    @property
    def directory(self) -> str:
        return os.path.dirname(self.path)


@dataclass(frozen=True, slots=True)
class ContentMatch:
    """Lines of one indexed file that satisfy a pattern."""

    file_path: str
    line_indices: tuple[int, ...]  # 0-based, ascending

    @property
    def count(self) -> int:
        return len(self.line_indices)


@dataclass(frozen=True, slots=True)
class LineContext:
    """A keyword hit with its surrounding block (context included)."""

    line: int  # 1-based
    content: str
    context: tuple[str, ...]  # start..end inclusive, hit line included
    start: int  # 1-based
    end: int  # 1-based


@dataclass(frozen=True)
class FileFilter:
    """Criteria for ContentIndex.filter_files. Unset fields do not filter."""

    extension: str | None = None
    directory: str | None = None
    min_size: int | None = None
    max_size: int | None = None
    modified_after: datetime | None = None
    modified_before: datetime | None = None
    keyword: str | None = None


@dataclass
class IndexStats:
    """Point-in-time summary of a content index."""

    total_files: int = 0
    total_size: int = 0
    total_lines: int = 0
    extension_counts: dict[str, int] = field(default_factory=dict)
    directory_counts: dict[str, int] = field(default_factory=dict)
    keywords_indexed: int = 0
    is_indexing: bool = False
    last_error: str | None = None
    last_duration_ms: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_files": self.total_files,
            "total_size": self.total_size,
            "total_lines": self.total_lines,
            "extension_counts": dict(self.extension_counts),
            "directory_counts": dict(self.directory_counts),
            "keywords_indexed": self.keywords_indexed,
            "is_indexing": self.is_indexing,
            "last_error": self.last_error,
            "last_duration_ms": self.last_duration_ms,
        }
