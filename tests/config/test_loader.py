"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence: defaults < global < project < env < kwargs
"""

from __future__ import annotations

from pathlib import Path

import pytest

from treegrep.config import loader
from treegrep.config.loader import _deep_merge, _load_yaml, load_config
from treegrep.core.errors import ConfigError, ErrorCode


@pytest.fixture(autouse=True)
def no_global_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the global config at an empty location."""
    path = tmp_path / "global" / "config.yaml"
    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", path)
    return path


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("search:\n  max_results: 5\n")

        assert _load_yaml(yaml_file) == {"search": {"max_results": 5}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("search:\n  max_results:\n    - invalid: [unclosed")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)

        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_for_non_mapping(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="mapping"):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_empty_dicts(self) -> None:
        assert _deep_merge({}, {}) == {}

    def test_override_wins(self) -> None:
        assert _deep_merge({"a": 1}, {"a": 2}) == {"a": 2}

    def test_nested_merge(self) -> None:
        base = {"search": {"max_results": 1, "max_depth": 2}}
        override = {"search": {"max_depth": 3}}

        assert _deep_merge(base, override) == {"search": {"max_results": 1, "max_depth": 3}}

    def test_base_not_mutated(self) -> None:
        base = {"a": {"b": 1}}

        _deep_merge(base, {"a": {"b": 2}})

        assert base == {"a": {"b": 1}}


class TestLoadConfig:
    """Tests for load_config precedence."""

    def test_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)

        assert config.search.max_results == 1000
        assert config.logging.level == "WARNING"

    def test_project_yaml(self, tmp_path: Path) -> None:
        (tmp_path / ".treegrep.yaml").write_text("search:\n  max_results: 7\n")

        assert load_config(tmp_path).search.max_results == 7

    def test_project_overrides_global(self, tmp_path: Path, no_global_config: Path) -> None:
        no_global_config.parent.mkdir(parents=True)
        no_global_config.write_text("search:\n  max_results: 3\n  max_depth: 4\n")
        (tmp_path / ".treegrep.yaml").write_text("search:\n  max_results: 7\n")

        config = load_config(tmp_path)

        assert config.search.max_results == 7
        assert config.search.max_depth == 4

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / ".treegrep.yaml").write_text("search:\n  worker_count: 2\n")
        monkeypatch.setenv("TREEGREP__SEARCH__WORKER_COUNT", "6")

        assert load_config(tmp_path).search.worker_count == 6

    def test_kwargs_override_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TREEGREP__LOGGING__LEVEL", "DEBUG")

        config = load_config(tmp_path, logging={"level": "ERROR"})

        assert config.logging.level == "ERROR"

    def test_invalid_value_raises_config_error(self, tmp_path: Path) -> None:
        (tmp_path / ".treegrep.yaml").write_text("search:\n  worker_count: 0\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert "worker_count" in exc_info.value.details["field"]
