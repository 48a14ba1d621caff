"""Core module exports."""

from treegrep.core.errors import (
    ConfigError,
    ErrorCode,
    IndexingError,
    SearchError,
    TreegrepError,
)
from treegrep.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)
from treegrep.core.progress import pluralize, spinner, status

__all__ = [
    # Errors
    "TreegrepError",
    "ConfigError",
    "ErrorCode",
    "IndexingError",
    "SearchError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "set_request_id",
    # Progress
    "pluralize",
    "spinner",
    "status",
]
