"""Search request and result types."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Literal

from treegrep.config.constants import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_RESULTS,
    DEFAULT_QUEUE_SIZE,
    DEFAULT_WORKER_COUNT,
)

if TYPE_CHECKING:
    from treegrep.config.models import SearchConfig
    from treegrep.index.indexer import Indexer

IssueStage = Literal["walk", "read"]


@dataclass(frozen=True)
class SearchOptions:
    """Parameters for one search invocation."""

    pattern: str
    directories: Sequence[str] = (".",)
    is_regex: bool = False
    case_sensitive: bool = True
    file_patterns: Sequence[str] = ()
    max_results: int = DEFAULT_MAX_RESULTS
    max_depth: int = DEFAULT_MAX_DEPTH
    context_lines: int = 0
    use_index: bool = False
    indexer: Indexer | None = None
    worker_count: int = DEFAULT_WORKER_COUNT
    queue_size: int = DEFAULT_QUEUE_SIZE

    def normalized(self) -> SearchOptions:
        """Return a copy with out-of-range values replaced by their defaults."""
        return replace(
            self,
            directories=tuple(str(d) for d in self.directories),
            file_patterns=tuple(self.file_patterns),
            max_results=self.max_results if self.max_results > 0 else DEFAULT_MAX_RESULTS,
            max_depth=self.max_depth if self.max_depth >= 0 else DEFAULT_MAX_DEPTH,
            context_lines=max(self.context_lines, 0),
            worker_count=max(self.worker_count, 1),
            queue_size=max(self.queue_size, 1),
        )

    @classmethod
    def from_config(
        cls,
        pattern: str,
        config: SearchConfig,
        **overrides: Any,
    ) -> SearchOptions:
        """Build options from configured defaults; keyword overrides win."""
        values: dict[str, Any] = {
            "max_results": config.max_results,
            "max_depth": config.max_depth,
            "context_lines": config.context_lines,
            "worker_count": config.worker_count,
            "queue_size": config.queue_size,
            "file_patterns": tuple(config.file_patterns),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(pattern=pattern, **values)


@dataclass
class SearchResult:
    """A single hit: one line in one file."""

    file_path: str
    line: int  # 1-based
    content: str
    context: list[str] = field(default_factory=list)
    match_start: int = -1
    match_end: int = -1

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_path": self.file_path,
            "line": self.line,
            "content": self.content,
            "context": list(self.context),
            "match_start": self.match_start,
            "match_end": self.match_end,
        }


@dataclass(frozen=True)
class SearchIssue:
    """A recoverable per-file or per-directory problem."""

    path: str
    stage: IssueStage
    message: str
    error_type: str

    @classmethod
    def from_exception(cls, path: str, stage: IssueStage, exc: BaseException) -> SearchIssue:
        message = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
        return cls(path=path, stage=stage, message=message, error_type=type(exc).__name__)

    def to_dict(self) -> dict[str, str]:
        return {
            "path": self.path,
            "stage": self.stage,
            "message": self.message,
            "error_type": self.error_type,
        }


@dataclass
class SearchOutcome:
    """Results and collected issues of one search."""

    results: list[SearchResult] = field(default_factory=list)
    issues: list[SearchIssue] = field(default_factory=list)
    files_scanned: int = 0
    cap_reached: bool = False
    used_index: bool = False
    duration_ms: int = 0

    @property
    def match_count(self) -> int:
        return len(self.results)

    @property
    def skipped_count(self) -> int:
        """Number of distinct paths that could not be walked or read."""
        return len({issue.path for issue in self.issues})

    @property
    def partial(self) -> bool:
        return bool(self.issues)

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "issues": [i.to_dict() for i in self.issues],
            "match_count": self.match_count,
            "skipped_count": self.skipped_count,
            "files_scanned": self.files_scanned,
            "cap_reached": self.cap_reached,
            "used_index": self.used_index,
            "duration_ms": self.duration_ms,
        }
