"""Tests for treegrep index command."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from treegrep.cli.main import cli


class TestIndexCommand:
    def test_json_stats(self, runner: CliRunner, sample_tree: Path) -> None:
        result = runner.invoke(cli, ["index", "--json", str(sample_tree)])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["total_files"] == 2
        assert payload["total_lines"] == 4
        assert payload["extension_counts"] == {".txt": 2}
        assert payload["keywords"] == {}

    def test_keywords(self, runner: CliRunner, sample_tree: Path) -> None:
        result = runner.invoke(cli, ["index", "--json", "-k", "bar", str(sample_tree)])

        payload = json.loads(result.stdout)
        assert payload["keywords"] == {"bar": [str(sample_tree / "a.txt")]}
        assert payload["keywords_indexed"] == 1

    def test_human_output(self, runner: CliRunner, sample_tree: Path) -> None:
        result = runner.invoke(cli, ["index", "-k", "baz", str(sample_tree)])

        assert result.exit_code == 0
        assert "Indexed 2 files, 4 lines" in result.stderr
        assert ".txt" in result.stderr
        assert "'baz': 1 file" in result.stderr

    def test_missing_path_rejected(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["index", str(tmp_path / "missing")])

        assert result.exit_code == 2

    def test_watch_until_interrupted(self, runner: CliRunner, sample_tree: Path) -> None:
        """Given --watch, the command watches until Ctrl-C, then exits cleanly."""
        with patch("treegrep.cli.index.time.sleep", side_effect=KeyboardInterrupt):
            result = runner.invoke(cli, ["index", "--watch", str(sample_tree)])

        assert result.exit_code == 0, result.output
        assert "Watching for changes" in result.stderr
