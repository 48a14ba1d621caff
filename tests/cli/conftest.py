"""Shared fixtures for CLI tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from treegrep.config import loader


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Run every command with no global config and an empty project config dir."""
    config_dir = tmp_path_factory.mktemp("config")
    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", config_dir / "no-global.yaml")
    monkeypatch.chdir(config_dir)
    return config_dir
