"""Shared, lock-protected collections filled by search workers."""

from __future__ import annotations

import threading

import structlog

from treegrep.search.models import IssueStage, SearchIssue, SearchResult

logger = structlog.get_logger()


class ResultAggregator:
    """Append-only result list with a soft global cap.

    The append and the cap comparison happen under one lock. The lock is
    never held during file I/O or pattern matching.
    """

    def __init__(self, max_results: int) -> None:
        self._max_results = max_results
        self._results: list[SearchResult] = []
        self._lock = threading.Lock()
        self._cap_reached = False

    @property
    def max_results(self) -> int:
        return self._max_results

    def add(self, result: SearchResult) -> bool:
        """Append a result. Returns True once the cap has been reached."""
        with self._lock:
            self._results.append(result)
            if len(self._results) >= self._max_results:
                self._cap_reached = True
            return self._cap_reached

    @property
    def cap_reached(self) -> bool:
        """Unsynchronized read; callers treat it as a hint to stop early."""
        return self._cap_reached

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)

    def snapshot(self) -> list[SearchResult]:
        with self._lock:
            return list(self._results)


class ErrorCollector:
    """Gathers recoverable errors. Never raises, never aborts the search."""

    def __init__(self) -> None:
        self._issues: list[SearchIssue] = []
        self._lock = threading.Lock()

    def add(self, path: str, stage: IssueStage, exc: BaseException) -> SearchIssue:
        issue = SearchIssue.from_exception(path, stage, exc)
        with self._lock:
            self._issues.append(issue)
        logger.debug(
            "search_issue",
            path=path,
            stage=stage,
            error_type=issue.error_type,
            error=issue.message,
        )
        return issue

    def __len__(self) -> int:
        with self._lock:
            return len(self._issues)

    def snapshot(self) -> list[SearchIssue]:
        with self._lock:
            return list(self._issues)
