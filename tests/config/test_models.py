"""Tests for config/models.py and SearchOptions built from it.

Covers:
- Defaults and bounds of SearchConfig, IndexConfig, WatcherConfig
- LogOutputConfig destination validation
- SearchOptions.from_config() and normalized()
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from treegrep.config.constants import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_RESULTS,
    DEFAULT_WORKER_COUNT,
)
from treegrep.config.models import (
    IndexConfig,
    LoggingConfig,
    LogOutputConfig,
    SearchConfig,
    TreegrepConfig,
    WatcherConfig,
)
from treegrep.core.excludes import DEFAULT_IGNORE_PATTERNS
from treegrep.search.models import SearchOptions


class TestLogOutputConfig:
    """Tests for LogOutputConfig validation."""

    @pytest.mark.parametrize("destination", ["stderr", "stdout"])
    def test_stream_destinations(self, destination: str) -> None:
        assert LogOutputConfig(destination=destination).destination == destination

    def test_absolute_file_destination(self) -> None:
        assert LogOutputConfig(destination="/tmp/treegrep.log").destination == "/tmp/treegrep.log"

    def test_relative_file_destination_rejected(self) -> None:
        with pytest.raises(ValidationError, match="absolute"):
            LogOutputConfig(destination="logs/treegrep.log")


class TestDefaults:
    def test_root_sections(self) -> None:
        config = TreegrepConfig()

        assert config.logging == LoggingConfig()
        assert config.logging.level == "WARNING"
        assert config.search.max_results == DEFAULT_MAX_RESULTS
        assert config.search.max_depth == DEFAULT_MAX_DEPTH
        assert config.search.worker_count == DEFAULT_WORKER_COUNT
        assert config.index.ignore_patterns == list(DEFAULT_IGNORE_PATTERNS)
        assert config.watcher == WatcherConfig()

    def test_max_file_size_bytes(self) -> None:
        assert IndexConfig(max_file_size_mb=2).max_file_size_bytes == 2 * 1024 * 1024

    def test_no_size_limit(self) -> None:
        config = IndexConfig(max_file_size_mb=None)

        assert config.max_file_size_bytes is None
        assert IndexConfig().skip_vcs_dirs is True


class TestBounds:
    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("context_lines", -1),
            ("context_lines", 101),
            ("worker_count", 0),
            ("worker_count", 65),
            ("queue_size", 0),
        ],
    )
    def test_search_config_rejects(self, field: str, value: int) -> None:
        with pytest.raises(ValidationError):
            SearchConfig(**{field: value})

    def test_index_config_rejects_zero_size(self) -> None:
        with pytest.raises(ValidationError):
            IndexConfig(max_file_size_mb=0)

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")


class TestSearchOptionsFromConfig:
    def test_config_values_used(self) -> None:
        config = SearchConfig(max_results=5, context_lines=2, file_patterns=["*.py"])

        options = SearchOptions.from_config("x", config)

        assert options.max_results == 5
        assert options.context_lines == 2
        assert options.file_patterns == ("*.py",)

    def test_overrides_win_and_none_is_ignored(self) -> None:
        config = SearchConfig(max_results=5, max_depth=3)

        options = SearchOptions.from_config("x", config, max_results=9, max_depth=None)

        assert options.max_results == 9
        assert options.max_depth == 3


class TestNormalized:
    def test_out_of_range_values_replaced(self) -> None:
        options = SearchOptions(
            pattern="x",
            directories=["a", "b"],
            max_results=0,
            max_depth=-1,
            context_lines=-4,
            worker_count=0,
            queue_size=-2,
        ).normalized()

        assert options.directories == ("a", "b")
        assert options.max_results == DEFAULT_MAX_RESULTS
        assert options.max_depth == DEFAULT_MAX_DEPTH
        assert options.context_lines == 0
        assert options.worker_count == 1
        assert options.queue_size == 1

    def test_zero_depth_is_valid(self) -> None:
        assert SearchOptions(pattern="x", max_depth=0).normalized().max_depth == 0
