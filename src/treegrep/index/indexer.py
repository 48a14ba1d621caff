"""Background population of the content index.

Design:
- ``start_indexing()`` runs a full pass on a background thread
- File reads inside a pass are spread over a ThreadPoolExecutor
- ``wait_for_indexing()`` blocks on an Event until no pass is in flight
- ``refresh_file()`` keeps single entries current (watcher, lookups)
- Optional auto-update re-runs the pass on an interval
"""

from __future__ import annotations

import os
import threading
import time
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from pathlib import Path

import structlog

from treegrep.config.models import IndexConfig
from treegrep.core.errors import IndexingError
from treegrep.core.excludes import is_ignored, matches_any
from treegrep.index.content import ContentIndex, load_indexed_file
from treegrep.index.models import IndexedFile, IndexStats

logger = structlog.get_logger()


class IndexerState(Enum):
    """Indexer state."""

    IDLE = "idle"
    INDEXING = "indexing"


class Indexer:
    """Owns a ContentIndex and the passes that fill it."""

    def __init__(self, config: IndexConfig | None = None, index: ContentIndex | None = None) -> None:
        self.config = config or IndexConfig()
        self.index = index or ContentIndex()
        self._state = IndexerState.IDLE
        self._state_lock = threading.Lock()
        self._done = threading.Event()
        self._done.set()
        self._last_error: str | None = None
        self._last_duration_ms: int | None = None
        self._auto_stop = threading.Event()
        self._auto_thread: threading.Thread | None = None

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _begin(self) -> None:
        with self._state_lock:
            if self._state == IndexerState.INDEXING:
                raise IndexingError.already_running()
            self._state = IndexerState.INDEXING
            self._done.clear()

    def _finish(self) -> None:
        with self._state_lock:
            self._state = IndexerState.IDLE
            self._done.set()

    def start_indexing(self) -> None:
        """Start a full indexing pass in the background.

        Raises:
            IndexingError: If a pass is already in progress.
        """
        self._begin()
        logger.info(
            "indexing_started",
            directories=self.config.directories,
            recursive=self.config.recursive,
        )
        thread = threading.Thread(target=self._run, name="treegrep-indexer", daemon=True)
        thread.start()

    def index_now(self) -> IndexStats:
        """Run a full indexing pass on the calling thread."""
        self._begin()
        self._run()
        return self.stats()

    def _run(self) -> None:
        start = time.monotonic()
        self._last_error = None
        try:
            for root in self.config.directories:
                try:
                    self._index_root(root)
                except IndexingError as e:
                    self._last_error = e.message
                    logger.error("indexing_directory_failed", dir=root, error=e.message)
            if self.config.keywords:
                self.index.index_keywords(self.config.keywords)
        except Exception as e:
            self._last_error = str(e)
            logger.error("indexing_failed", error=str(e))
        finally:
            self._last_duration_ms = int((time.monotonic() - start) * 1000)
            self._finish()
            logger.info(
                "indexing_completed",
                files=len(self.index),
                duration_ms=self._last_duration_ms,
            )

    def _index_root(self, root: str) -> None:
        # A file root is indexed as given, like the walker yields it
        if os.path.isfile(root):
            self.index.add_file(root)
            return
        self._index_directory(root)

    def _index_directory(self, directory: str) -> None:
        if not os.path.isdir(directory):
            reason = "does not exist" if not os.path.exists(directory) else "not a directory"
            raise IndexingError.directory_unavailable(directory, reason)

        candidates = list(self._collect_files(directory))
        with ThreadPoolExecutor(
            max_workers=self.config.parallel_jobs,
            thread_name_prefix="treegrep-index-reader",
        ) as executor:
            for indexed in executor.map(self._load_or_none, candidates):
                if indexed is not None:
                    self.index.put(indexed)

    def _collect_files(self, directory: str) -> Iterator[str]:
        root = os.path.abspath(directory)

        def on_error(exc: OSError) -> None:
            logger.warning("index_walk_error", path=exc.filename, error=exc.strerror or str(exc))

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            if self.config.recursive:
                dirnames[:] = sorted(d for d in dirnames if not self.ignores(d))
            else:
                dirnames.clear()
            for name in sorted(filenames):
                path = os.path.join(dirpath, name)
                if self.should_index(path):
                    yield path

    def _load_or_none(self, path: str) -> IndexedFile | None:
        try:
            return load_indexed_file(path)
        except IndexingError as e:
            logger.warning("index_file_failed", path=path, error=e.message)
            return None

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def ignores(self, name: str) -> bool:
        """True if a file or directory base name is excluded from the index."""
        if self.config.skip_vcs_dirs:
            return is_ignored(name, self.config.ignore_patterns)
        return matches_any(name, self.config.ignore_patterns)

    def should_index(self, path: str, size: int | None = None) -> bool:
        """Apply ignore patterns, extension lists and the size limit to one file."""
        if self.ignores(os.path.basename(path)):
            return False
        extension = os.path.splitext(path)[1]
        if self.config.exclude_extensions and extension in self.config.exclude_extensions:
            return False
        if self.config.include_extensions and extension not in self.config.include_extensions:
            return False
        limit = self.config.max_file_size_bytes
        if limit is None:
            return True
        if size is None:
            try:
                size = os.path.getsize(path)
            except OSError:
                return False
        return size <= limit

    # ------------------------------------------------------------------
    # Waiting and lookups
    # ------------------------------------------------------------------

    @property
    def is_indexing(self) -> bool:
        with self._state_lock:
            return self._state == IndexerState.INDEXING

    def wait_for_indexing(self, timeout: float | None = None) -> bool:
        """Block until no pass is in flight. Returns False on timeout."""
        return self._done.wait(timeout)

    def refresh_file(self, path: str | Path) -> bool:
        """Re-read one file. Deleted or excluded files are dropped from the index.

        Returns True if the file is indexed afterwards.

        Raises:
            IndexingError: If the file exists but cannot be read.
        """
        abs_path = os.path.abspath(path)
        try:
            st = os.stat(abs_path)
        except FileNotFoundError:
            self.index.remove_file(abs_path)
            return False
        except OSError as e:
            raise IndexingError.file_unreadable(abs_path, e.strerror or str(e)) from e

        if os.path.isdir(abs_path):
            return False
        if not self.should_index(abs_path, st.st_size):
            self.index.remove_file(abs_path)
            return False
        self.index.add_file(abs_path)
        return True

    def search_by_path(self, path: str | Path) -> IndexedFile | None:
        """Indexed record for ``path``, reading it on a miss."""
        indexed = self.index.get(path)
        if indexed is not None:
            return indexed
        try:
            self.refresh_file(path)
        except IndexingError:
            return None
        return self.index.get(path)

    # ------------------------------------------------------------------
    # Auto update
    # ------------------------------------------------------------------

    def start_auto_update(self) -> None:
        """Re-index every ``update_interval_sec`` seconds. No-op when disabled."""
        if self.config.update_interval_sec <= 0 or self._auto_thread is not None:
            return
        self._auto_stop.clear()
        self._auto_thread = threading.Thread(
            target=self._auto_update_loop,
            name="treegrep-index-updater",
            daemon=True,
        )
        self._auto_thread.start()
        logger.info("index_auto_update_started", interval_sec=self.config.update_interval_sec)

    def _auto_update_loop(self) -> None:
        while not self._auto_stop.wait(self.config.update_interval_sec):
            if self.is_indexing:
                continue
            try:
                self.start_indexing()
            except IndexingError as e:
                logger.error("index_auto_update_failed", error=e.message)

    def stop_auto_update(self) -> None:
        self._auto_stop.set()
        if self._auto_thread is not None:
            self._auto_thread.join()
            self._auto_thread = None

    def stats(self) -> IndexStats:
        stats = self.index.stats()
        stats.is_indexing = self.is_indexing
        stats.last_error = self._last_error
        stats.last_duration_ms = self._last_duration_ms
        return stats
