"""Treegrep error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Index
- 4xxx: Search
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Index (3xxx)
    INDEX_ALREADY_RUNNING = 3001
    INDEX_DIRECTORY_UNAVAILABLE = 3002
    INDEX_FILE_UNREADABLE = 3003

    # Search (4xxx)
    SEARCH_INVALID_PATTERN = 4001
    SEARCH_ROOT_INACCESSIBLE = 4002
    SEARCH_NO_ROOTS = 4003


@dataclass(frozen=True, slots=True)
class TreegrepError(Exception):
    """Base error with structured context for CLI and JSON output."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'SEARCH_INVALID_PATTERN')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(TreegrepError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class IndexingError(TreegrepError):
    """Content index population errors."""

    @classmethod
    def already_running(cls) -> "IndexingError":
        return cls(
            code=ErrorCode.INDEX_ALREADY_RUNNING,
            message="Indexing is already in progress",
            retryable=True,
        )

    @classmethod
    def directory_unavailable(cls, path: str, reason: str) -> "IndexingError":
        return cls(
            code=ErrorCode.INDEX_DIRECTORY_UNAVAILABLE,
            message=f"Cannot index directory {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def file_unreadable(cls, path: str, reason: str) -> "IndexingError":
        return cls(
            code=ErrorCode.INDEX_FILE_UNREADABLE,
            message=f"Cannot read {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class SearchError(TreegrepError):
    """Fatal search setup errors. Per-file problems are never raised."""

    @classmethod
    def invalid_pattern(cls, pattern: str, reason: str) -> "SearchError":
        return cls(
            code=ErrorCode.SEARCH_INVALID_PATTERN,
            message=f"Invalid pattern {pattern!r}: {reason}",
            details={"pattern": pattern, "reason": reason},
        )

    @classmethod
    def root_inaccessible(cls, path: str, reason: str) -> "SearchError":
        return cls(
            code=ErrorCode.SEARCH_ROOT_INACCESSIBLE,
            message=f"Search root is not accessible: {path} ({reason})",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def no_roots(cls) -> "SearchError":
        return cls(
            code=ErrorCode.SEARCH_NO_ROOTS,
            message="No directories to search",
        )

