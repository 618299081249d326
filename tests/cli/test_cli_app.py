"""
Tests for the proactor Typer application.
"""

from __future__ import annotations

import json

from typer.testing import CliRunner

from proactor.cli.app import app

runner = CliRunner()


class TestRootApp:
    def test_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "shell" in result.output
        assert "run" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("proactor ")

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        # Typer returns exit code 0 or 2 for no_args_is_help
        assert result.exit_code in (0, 2)


class TestRunCommand:
    def _run(self, *args: str):
        return runner.invoke(
            app,
            ["run", "--min-ms", "1", "--max-ms", "5", "--log-level", "ERROR", *args],
        )

    def test_json_summary(self):
        result = self._run("--tasks", "6", "--workers", "2", "--json")
        assert result.exit_code == 0, result.output
        summary = json.loads(result.stdout)
        assert summary["workers"] == 2
        assert summary["submitted"] == 6
        assert summary["completed"] == 6
        assert summary["failed"] == 0
        assert 1 <= summary["peak_concurrency"] <= 2

    def test_fail_every(self):
        result = self._run("--tasks", "6", "--workers", "3", "--fail-every", "3", "--json", "--seed", "7")
        assert result.exit_code == 0, result.output
        summary = json.loads(result.stdout)
        assert summary["completed"] == 4
        assert summary["failed"] == 2

    def test_plain_summary(self):
        result = self._run("--tasks", "3", "--workers", "1")
        assert result.exit_code == 0, result.output
        assert "Run summary" in result.stdout
        assert "completed" in result.stdout

    def test_min_greater_than_max(self):
        result = runner.invoke(app, ["run", "--min-ms", "10", "--max-ms", "5"])
        assert result.exit_code == 2

    def test_invalid_worker_count(self):
        result = self._run("--tasks", "1", "--workers", "0")
        assert result.exit_code == 1

    def test_workers_from_env(self, monkeypatch):
        monkeypatch.setenv("PROACTOR_WORKER_COUNT", "4")
        result = self._run("--tasks", "2", "--json")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["workers"] == 4


class TestShellCommand:
    def test_help(self):
        result = runner.invoke(app, ["shell", "--help"])
        assert result.exit_code == 0
        assert "--scale" in result.output
