"""Config module exports."""

from treegrep.config.loader import TreegrepSettings, load_config
from treegrep.config.models import (
    IndexConfig,
    LoggingConfig,
    LogOutputConfig,
    SearchConfig,
    TreegrepConfig,
    WatcherConfig,
)

__all__ = [
    "load_config",
    "TreegrepConfig",
    "TreegrepSettings",
    "IndexConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "SearchConfig",
    "WatcherConfig",
]
