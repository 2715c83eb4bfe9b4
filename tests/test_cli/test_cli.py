"""Tests for the remedy command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from remedy.cli.main import cli

CONSOLE_SOURCE = "import { run } from './run'\nconsole.log('starting')\nrun()\n"
SECRET_SOURCE = 'const apiSecret = "abcdefghijklmnopqrstuvwxyz123456";\n'


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "app.ts").write_text(CONSOLE_SOURCE)
    return tmp_path


class TestGlobalOptions:
    def test_version(self, runner: CliRunner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_help_lists_commands(self, runner: CliRunner):
        result = runner.invoke(cli, ["--help"])

        for command in ("scan", "fix", "strategies", "learning", "undo"):
            assert command in result.output

    def test_missing_file_rejected(self, runner: CliRunner, project: Path):
        result = runner.invoke(cli, ["scan", "nope.ts"])
        assert result.exit_code == 2


class TestScan:
    def test_prints_plan(self, runner: CliRunner, project: Path):
        result = runner.invoke(cli, ["scan", "app.ts"])

        assert result.exit_code == 0
        assert "console_log_in_production" in result.output
        assert "Safe to fix" in result.output

    def test_does_not_modify_file(self, runner: CliRunner, project: Path):
        runner.invoke(cli, ["scan", "app.ts"])
        assert (project / "app.ts").read_text() == CONSOLE_SOURCE


class TestFix:
    def test_preview_leaves_file_untouched(self, runner: CliRunner, project: Path):
        result = runner.invoke(cli, ["fix", "app.ts"])

        assert result.exit_code == 0
        assert "replace_console_log" in result.output
        assert (project / "app.ts").read_text() == CONSOLE_SOURCE

    def test_json_output(self, runner: CliRunner, project: Path):
        result = runner.invoke(cli, ["fix", "app.ts", "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert len(payload) == 1
        assert payload[0]["session"]["successful_fixes"] == 1
        assert payload[0]["applied_fixes"][0]["strategy_id"] == "replace_console_log"
        assert payload[0]["changed"] is True

    def test_write_applies_with_backup(self, runner: CliRunner, project: Path):
        result = runner.invoke(cli, ["fix", "app.ts", "--write", "--yes"])

        assert result.exit_code == 0
        assert "logger.debug('starting')" in (project / "app.ts").read_text()
        assert list((project / ".remedy" / "backups").glob("*/manifest.json"))

    def test_write_handles_non_utf8_file(self, runner: CliRunner, project: Path):
        raw = b"// caf\xe9\n" + CONSOLE_SOURCE.encode()
        (project / "legacy.ts").write_bytes(raw)

        result = runner.invoke(cli, ["fix", "legacy.ts", "--write", "--yes"])

        assert result.exit_code == 0, result.output
        assert "logger.debug('starting')" in (project / "legacy.ts").read_text()
        backups = list((project / ".remedy" / "backups").glob("*/legacy.ts.bak"))
        assert backups[0].read_bytes() == raw

    def test_risky_fix_needs_unsafe(self, runner: CliRunner, project: Path):
        (project / "secrets.ts").write_text(SECRET_SOURCE)

        runner.invoke(cli, ["fix", "secrets.ts", "--write", "--yes"])
        assert (project / "secrets.ts").read_text() == SECRET_SOURCE

        result = runner.invoke(cli, ["fix", "secrets.ts", "--write", "--yes", "--unsafe"])
        assert result.exit_code == 0
        assert "process.env.APISECRET" in (project / "secrets.ts").read_text()

    def test_fail_on_regression_passes_without_regression(self, runner: CliRunner, project: Path):
        result = runner.invoke(cli, ["fix", "app.ts", "--fail-on-regression"])
        assert result.exit_code == 0

    def test_safety_mode_from_config(self, runner: CliRunner, project: Path):
        (project / "remedy.toml").write_text("[engine]\nsafety_mode = false\n")
        (project / "secrets.ts").write_text(SECRET_SOURCE)

        result = runner.invoke(cli, ["fix", "secrets.ts", "--json"])

        payload = json.loads(result.stdout)
        assert payload[0]["session"]["risky_fixes"] == 1


class TestStrategiesAndLearning:
    def test_strategies_lists_catalog(self, runner: CliRunner, project: Path):
        result = runner.invoke(cli, ["strategies"])

        assert result.exit_code == 0
        assert "replace_console_log" in result.output
        assert "reduce_complexity" in result.output

    def test_learning_records_fix_outcomes(self, runner: CliRunner, project: Path):
        runner.invoke(cli, ["fix", "app.ts"])

        result = runner.invoke(cli, ["learning", "--json"])
        entries = json.loads(result.stdout)

        assert [e["strategy_id"] for e in entries] == ["replace_console_log"]
        assert entries[0]["attempts"] == 1

    def test_learning_reset(self, runner: CliRunner, project: Path):
        runner.invoke(cli, ["fix", "app.ts"])

        result = runner.invoke(cli, ["learning", "--reset"])
        assert "Cleared 1" in result.output

        result = runner.invoke(cli, ["learning", "--json"])
        assert json.loads(result.stdout) == []


class TestUndo:
    def test_list_and_undo_last(self, runner: CliRunner, project: Path):
        runner.invoke(cli, ["fix", "app.ts", "--write", "--yes"])

        listed = runner.invoke(cli, ["undo", "--list"])
        assert "fix_" in listed.output

        result = runner.invoke(cli, ["undo", "--last"])
        assert result.exit_code == 0
        assert (project / "app.ts").read_text() == CONSOLE_SOURCE

    def test_nothing_to_undo(self, runner: CliRunner, project: Path):
        result = runner.invoke(cli, ["undo", "--last"])

        assert result.exit_code == 0
        assert "No recent fix session" in result.output
