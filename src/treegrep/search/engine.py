"""Concurrent search: walker thread -> bounded queue -> scanner workers.

Design:
- One producer task walks the roots and feeds a bounded queue
- ``worker_count`` worker tasks drain the queue, one file at a time
- Hits go into a single ResultAggregator; its cap is a soft stop signal
- Per-file and per-directory failures go into an ErrorCollector
- Invalid patterns and inaccessible roots raise before any thread starts
"""

from __future__ import annotations

import os
import queue
import time
from concurrent.futures import ThreadPoolExecutor

import structlog

from treegrep.config.constants import QUEUE_POLL_SEC
from treegrep.core.errors import SearchError
from treegrep.core.logging import clear_request_id, get_request_id, set_request_id
from treegrep.search.aggregator import ErrorCollector, ResultAggregator
from treegrep.search.indexed import search_index
from treegrep.search.matcher import PatternMatcher
from treegrep.search.models import SearchOptions, SearchOutcome
from treegrep.search.scanner import scan_file
from treegrep.search.walker import walk

logger = structlog.get_logger()

# Queue sentinel: one per worker, sent after the walk ends
_DONE = None


def check_roots(directories: tuple[str, ...]) -> None:
    """Fail fast on roots that cannot be searched at all.

    Raises:
        SearchError: If there are no roots, or a root is missing or unlistable.
    """
    if not directories:
        raise SearchError.no_roots()
    for root in directories:
        if not os.path.exists(root):
            raise SearchError.root_inaccessible(root, "no such file or directory")
        if os.path.isdir(root):
            try:
                with os.scandir(root):
                    pass
            except OSError as e:
                raise SearchError.root_inaccessible(root, e.strerror or str(e)) from e
        elif not os.access(root, os.R_OK):
            raise SearchError.root_inaccessible(root, "permission denied")


class _SearchRun:
    """State shared by the producer and the workers of one search."""

    def __init__(self, options: SearchOptions, matcher: PatternMatcher) -> None:
        self.options = options
        self.matcher = matcher
        self.aggregator = ResultAggregator(options.max_results)
        self.errors = ErrorCollector()
        self.candidates: queue.Queue[str | None] = queue.Queue(maxsize=options.queue_size)
        self._request_id = get_request_id()

    def _put(self, item: str | None) -> bool:
        """Enqueue, re-checking the cap while the queue is full.

        Returns False if the cap tripped before the path could be queued.
        Sentinels are always delivered.
        """
        while True:
            if item is not _DONE and self.aggregator.cap_reached:
                return False
            try:
                self.candidates.put(item, timeout=QUEUE_POLL_SEC)
                return True
            except queue.Full:
                continue

    def produce(self) -> int:
        set_request_id(self._request_id)
        queued = 0
        try:
            for path in walk(
                self.options.directories,
                self.options.max_depth,
                self.options.file_patterns,
                self.errors,
            ):
                if not self._put(path):
                    break
                queued += 1
                if self.aggregator.cap_reached:
                    logger.debug("walk_stopped_at_cap", queued=queued)
                    break
        finally:
            for _ in range(self.options.worker_count):
                self._put(_DONE)
            clear_request_id()
        return queued

    def consume(self) -> int:
        set_request_id(self._request_id)
        scanned = 0
        try:
            while True:
                path = self.candidates.get()
                if path is _DONE:
                    break
                # Keep draining after the cap so the producer never blocks
                if self.aggregator.cap_reached:
                    continue
                scan_file(
                    path,
                    self.matcher,
                    self.options.context_lines,
                    self.aggregator,
                    self.errors,
                )
                scanned += 1
        finally:
            clear_request_id()
        return scanned


def search(options: SearchOptions) -> SearchOutcome:
    """Search files for a pattern.

    Uses the content index when ``options.use_index`` is set and an indexer
    is supplied, otherwise walks the roots with a pool of worker threads.

    Returns:
        SearchOutcome with hits and recoverable issues. Issues make the
        outcome partial, never failed.

    Raises:
        SearchError: If the pattern is an invalid regex or a root is
            inaccessible. No results are produced in that case.
    """
    options = options.normalized()
    owns_request_id = get_request_id() is None
    if owns_request_id:
        set_request_id()
    start = time.monotonic()

    try:
        logger.info(
            "search_started",
            pattern=options.pattern,
            regex=options.is_regex,
            case_sensitive=options.case_sensitive,
            directories=list(options.directories),
            use_index=options.use_index and options.indexer is not None,
        )
        matcher = PatternMatcher.compile(
            options.pattern,
            is_regex=options.is_regex,
            case_sensitive=options.case_sensitive,
        )
        check_roots(options.directories)

        if options.use_index and options.indexer is not None:
            aggregator = ResultAggregator(options.max_results)
            files = search_index(options.indexer, options, matcher, aggregator)
            outcome = SearchOutcome(
                results=aggregator.snapshot(),
                files_scanned=files,
                cap_reached=aggregator.cap_reached,
                used_index=True,
            )
        else:
            outcome = _search_files(options, matcher)

        outcome.duration_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            "search_completed",
            matches=outcome.match_count,
            files_scanned=outcome.files_scanned,
            issues=len(outcome.issues),
            cap_reached=outcome.cap_reached,
            duration_ms=outcome.duration_ms,
        )
        return outcome
    except SearchError as e:
        logger.warning("search_failed", error=e.error_name, message=e.message)
        raise
    finally:
        if owns_request_id:
            clear_request_id()


def _search_files(options: SearchOptions, matcher: PatternMatcher) -> SearchOutcome:
    run = _SearchRun(options, matcher)
    with ThreadPoolExecutor(
        max_workers=options.worker_count + 1,
        thread_name_prefix="treegrep-search",
    ) as executor:
        producer = executor.submit(run.produce)
        workers = [executor.submit(run.consume) for _ in range(options.worker_count)]
        # result() re-raises anything unexpected from a thread
        files_scanned = sum(w.result() for w in workers)
        producer.result()

    return SearchOutcome(
        results=run.aggregator.snapshot(),
        issues=run.errors.snapshot(),
        files_scanned=files_scanned,
        cap_reached=run.aggregator.cap_reached,
    )
