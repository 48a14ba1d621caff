"""Keep a content index current from filesystem change events.

Design:
- One background thread runs ``watchfiles.watch`` over the indexed directories
- Changes are batched by watchfiles (``debounce_ms``) and applied in one go
- Paths under ignored directories never reach the indexer
- Deleted paths are dropped; added/modified paths go through ``refresh_file``
"""

from __future__ import annotations

import os
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from watchfiles import Change, watch

from treegrep.config.models import WatcherConfig
from treegrep.core.errors import IndexingError
from treegrep.index.indexer import Indexer

logger = structlog.get_logger()


@dataclass
class ChangeSummary:
    """What one batch of change events did to the index."""

    refreshed: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class IndexWatcher:
    """Background watcher feeding change events into an Indexer."""

    def __init__(
        self,
        indexer: Indexer,
        config: WatcherConfig | None = None,
        on_change: Callable[[ChangeSummary], None] | None = None,
    ) -> None:
        self.indexer = indexer
        self.config = config or WatcherConfig()
        self.on_change = on_change
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def should_watch(self, change: Change, path: str) -> bool:  # noqa: ARG002
        """Reject paths with any ignored component below the watched roots."""
        for root in self.indexer.config.directories:
            abs_root = os.path.abspath(root)
            try:
                rel = Path(path).relative_to(abs_root)
            except ValueError:
                continue
            return not any(self.indexer.ignores(part) for part in rel.parts)
        return True

    def start(self) -> None:
        if self._thread is not None:
            return
        directories = [d for d in self.indexer.config.directories if os.path.isdir(d)]
        if not directories:
            logger.warning("index_watcher_no_directories")
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._watch_loop,
            args=(directories,),
            name="treegrep-index-watcher",
            daemon=True,
        )
        self._thread.start()
        logger.info(
            "index_watcher_started",
            directories=directories,
            debounce_ms=self.config.debounce_ms,
            polling=self.config.force_polling,
        )

    def _watch_loop(self, directories: list[str]) -> None:
        for changes in watch(
            *directories,
            watch_filter=self.should_watch,
            debounce=self.config.debounce_ms,
            stop_event=self._stop,
            force_polling=self.config.force_polling,
            raise_interrupt=False,
        ):
            summary = self.apply_changes(changes)
            if self.on_change is not None and (
                summary.refreshed or summary.removed or summary.failed
            ):
                self.on_change(summary)

    def stop(self, timeout: float | None = 2.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("index_watcher_stopped")

    def apply_changes(self, changes: Iterable[tuple[Change, str]]) -> ChangeSummary:
        """Apply one batch of change events to the index."""
        summary = ChangeSummary()
        for change, path in sorted(changes, key=lambda c: c[1]):
            if change == Change.deleted:
                if self.indexer.index.remove_file(path):
                    summary.removed.append(path)
                continue
            try:
                if self.indexer.refresh_file(path):
                    summary.refreshed.append(path)
            except IndexingError as e:
                summary.failed.append(path)
                logger.warning("index_refresh_failed", path=path, error=e.message)

        if summary.refreshed or summary.removed or summary.failed:
            logger.info(
                "index_changes_applied",
                refreshed=len(summary.refreshed),
                removed=len(summary.removed),
                failed=len(summary.failed),
            )
        return summary
