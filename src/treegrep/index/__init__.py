"""In-memory content index and its background population."""

from treegrep.index.content import ContentIndex, load_indexed_file
from treegrep.index.indexer import Indexer, IndexerState
from treegrep.index.models import (
    ContentMatch,
    ContentStats,
    FileFilter,
    IndexedFile,
    IndexStats,
    LineContext,
)
from treegrep.index.watcher import ChangeSummary, IndexWatcher

__all__ = [
    "ContentIndex",
    "load_indexed_file",
    "Indexer",
    "IndexerState",
    "IndexWatcher",
    "ChangeSummary",
    "ContentMatch",
    "ContentStats",
    "FileFilter",
    "IndexedFile",
    "IndexStats",
    "LineContext",
]
