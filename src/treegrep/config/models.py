"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (TREEGREP__SECTION__KEY)
3. Project YAML (.treegrep.yaml in the project root)
4. Global YAML (~/.config/treegrep/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    TREEGREP__<SECTION>__<KEY>=<VALUE>

Examples:
    TREEGREP__LOGGING__LEVEL=DEBUG
    TREEGREP__SEARCH__WORKER_COUNT=4
    TREEGREP__INDEX__MAX_FILE_SIZE_MB=2
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from treegrep.config.constants import (
    CONTEXT_LINES_MAX,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_RESULTS,
    DEFAULT_QUEUE_SIZE,
    DEFAULT_WORKER_COUNT,
    WORKER_COUNT_MAX,
)
from treegrep.core.excludes import DEFAULT_IGNORE_PATTERNS

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        TREEGREP__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG logs every skipped file.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class SearchConfig(BaseModel):
    """Defaults for search invocations.

    Env vars:
        TREEGREP__SEARCH__MAX_RESULTS: Result cap
        TREEGREP__SEARCH__MAX_DEPTH: Directory depth limit
        TREEGREP__SEARCH__CONTEXT_LINES: Lines of context around each hit
        TREEGREP__SEARCH__WORKER_COUNT: Parallel scanner threads
        TREEGREP__SEARCH__QUEUE_SIZE: Candidate queue capacity
    """

    max_results: int = Field(
        default=DEFAULT_MAX_RESULTS,
        description="Soft cap on results. Workers finish their current file, "
        "so up to worker_count - 1 extra results may be returned.",
    )
    max_depth: int = Field(
        default=DEFAULT_MAX_DEPTH,
        description="Directories deeper than this below a root are not entered.",
    )
    context_lines: int = Field(default=0, ge=0, le=CONTEXT_LINES_MAX)
    worker_count: int = Field(default=DEFAULT_WORKER_COUNT, ge=1, le=WORKER_COUNT_MAX)
    queue_size: int = Field(
        default=DEFAULT_QUEUE_SIZE,
        ge=1,
        description="Bounded queue between walker and workers.",
    )
    file_patterns: list[str] = Field(
        default_factory=list,
        description="Base-name globs a file must match. Empty means all files.",
    )


class IndexConfig(BaseModel):
    """Content index configuration.

    Env vars:
        TREEGREP__INDEX__MAX_FILE_SIZE_MB: Skip files larger than this
        TREEGREP__INDEX__PARALLEL_JOBS: Threads reading files while indexing
        TREEGREP__INDEX__UPDATE_INTERVAL_SEC: Auto re-index interval (0 disables)
    """

    directories: list[str] = Field(default_factory=list)
    recursive: bool = True
    ignore_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS),
        description="Base-name globs excluded from the index (files and directories).",
    )
    keywords: list[str] = Field(
        default_factory=list,
        description="Keywords pre-indexed for search_by_keyword lookups.",
    )
    skip_vcs_dirs: bool = Field(
        default=True,
        description="Always skip .git, .svn and friends, whatever ignore_patterns says.",
    )
    max_file_size_mb: float | None = Field(
        default=10,
        gt=0,
        description="Skip files larger than this (MB). None means no limit. "
        "RISK: Setting too high may cause memory issues with binary files.",
    )
    include_extensions: list[str] = Field(
        default_factory=list,
        description="Only index these extensions. Empty means all.",
    )
    exclude_extensions: list[str] = Field(default_factory=list)
    parallel_jobs: int = Field(default=4, ge=1)
    update_interval_sec: float = Field(
        default=0,
        ge=0,
        description="Re-index every N seconds in the background. 0 disables.",
    )

    @property
    def max_file_size_bytes(self) -> int | None:
        if self.max_file_size_mb is None:
            return None
        return int(self.max_file_size_mb * 1024 * 1024)


class WatcherConfig(BaseModel):
    """Filesystem watcher that keeps the content index current.

    Env vars:
        TREEGREP__WATCHER__ENABLED: Start the watcher with the index
        TREEGREP__WATCHER__DEBOUNCE_MS: Batch window for change events
    """

    enabled: bool = False
    debounce_ms: int = Field(default=300, ge=0)
    force_polling: bool = Field(
        default=False,
        description="Poll instead of native notifications (network mounts, WSL /mnt/*).",
    )


class TreegrepConfig(BaseModel):
    """Root configuration for treegrep."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)
