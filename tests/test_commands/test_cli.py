"""Tests for the click entry point with mocked services."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from click.testing import CliRunner

from commitdate import cli as cli_module
from commitdate.commands import _helpers
from commitdate.config import AppConfig
from commitdate.context import AppContext
from commitdate.errors import PreconditionError
from commitdate.models.commit import Commit, CommitScope
from commitdate.models.result import ChangedCommit, ErrorCode, RunResult

CHANGED = ChangedCommit(
    hash="abc1234",
    message="test: add feature",
    old_date="2025-01-15T10:00:00.000Z",
    new_date="2025-01-15T09:00:00.000Z",
    is_pushed=False,
)


@pytest.fixture
def app(monkeypatch):
    config = AppConfig()
    config.display.color = False
    ctx = AppContext(config=config, repo_path="/repo")
    monkeypatch.setattr(ctx, "check_preconditions", AsyncMock())
    ctx._session_service = AsyncMock()
    ctx._commit_service = AsyncMock()
    monkeypatch.setattr(_helpers, "AppContext", lambda config_path=None: ctx)
    return ctx


@pytest.fixture
def runner():
    return CliRunner()


class TestSingleShot:
    def test_success_json(self, app, runner):
        app.session_service.run_once.return_value = RunResult.succeeded(CHANGED)

        result = runner.invoke(
            cli_module.cli, ["--hash", "abc1234", "--date", "2025-01-15T09:00:00", "--json"]
        )

        assert result.exit_code == 0
        assert json.loads(result.output) == RunResult.succeeded(CHANGED).to_dict()
        app.session_service.run_once.assert_awaited_once_with(
            "abc1234", "2025-01-15T09:00:00", confirmed=False, allow_pushed=False, limit=100
        )

    def test_flags_forwarded(self, app, runner):
        app.session_service.run_once.return_value = RunResult.succeeded(CHANGED)

        runner.invoke(
            cli_module.cli,
            ["--all", "--no-confirm", "--hash", "abc1234", "-d", "2025-01-15T09:00:00"],
        )

        app.session_service.run_once.assert_awaited_once_with(
            "abc1234", "2025-01-15T09:00:00", confirmed=True, allow_pushed=True, limit=100
        )

    def test_failure_exits_1_with_summary(self, app, runner):
        app.session_service.run_once.return_value = RunResult.failed(
            ErrorCode.PUSHED_REQUIRES_CONFIRM, "Commit abc1234 is already pushed"
        )

        result = runner.invoke(cli_module.cli, ["--hash", "abc1234", "--date", "2025-01-15T09:00:00"])

        assert result.exit_code == 1
        assert "Error: Commit abc1234 is already pushed" in result.output

    def test_missing_date(self, app, runner):
        result = runner.invoke(cli_module.cli, ["--hash", "abc1234", "--json"])

        assert result.exit_code == 1
        assert json.loads(result.output)["errorCode"] == "MISSING_REQUIRED_OPTIONS"
        app.session_service.run_once.assert_not_awaited()

    def test_dirty_tree_is_hard_stop(self, app, runner):
        app.check_preconditions.side_effect = PreconditionError(
            "You have uncommitted changes", ErrorCode.UNCOMMITTED_CHANGES.value
        )

        result = runner.invoke(
            cli_module.cli, ["--hash", "abc1234", "--date", "2025-01-15T09:00:00", "--json"]
        )

        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert payload == {
            "success": False,
            "error": "You have uncommitted changes",
            "errorCode": "UNCOMMITTED_CHANGES",
        }
        app.session_service.run_once.assert_not_awaited()


class TestInteractive:
    def test_runs_interactive_loop(self, app, runner):
        app.session_service.run_interactive.return_value = 1

        result = runner.invoke(cli_module.cli, ["--count", "5"])

        assert result.exit_code == 0
        args = app.session_service.run_interactive.await_args.args
        assert args[1] == CommitScope.UNPUSHED
        assert args[2] == 5
        assert "Changed 1 commit date(s)." in result.output

    def test_not_a_repository(self, app, runner):
        app.check_preconditions.side_effect = PreconditionError(
            "Not a git repository", ErrorCode.NOT_A_REPOSITORY.value
        )

        result = runner.invoke(cli_module.cli, [])

        assert result.exit_code == 1
        assert "Not a git repository" in result.output
        app.session_service.run_interactive.assert_not_awaited()


class TestList:
    def test_list_json(self, app, runner):
        commit = Commit.create(
            "a" * 40, "feat: x", "A", datetime(2025, 1, 15, 10, tzinfo=timezone.utc),
            remote_refs=("origin/main",),
        )
        app.commit_service.list_commits.return_value = [commit]

        result = runner.invoke(cli_module.cli, ["list", "--all", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output)[0]["isPushed"] is True
        app.commit_service.list_commits.assert_awaited_once_with(CommitScope.ALL, 10)

    def test_list_text(self, app, runner):
        commit = Commit.create(
            "a" * 40, "feat: x", "A", datetime(2025, 1, 15, 10, tzinfo=timezone.utc)
        )
        app.commit_service.list_commits.return_value = [commit]

        result = runner.invoke(cli_module.cli, ["list", "-n", "3"])

        assert result.exit_code == 0
        assert "aaaaaaa (2025-01-15 10:00) feat: x" in result.output
        app.commit_service.list_commits.assert_awaited_once_with(CommitScope.UNPUSHED, 3)


class TestSubcommands:
    def test_set(self, app, runner):
        app.session_service.run_once.return_value = RunResult.succeeded(CHANGED)

        result = runner.invoke(cli_module.cli, ["set", "abc1234", "2025-01-15T09:00:00", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output)["commit"]["hash"] == "abc1234"
        app.session_service.run_once.assert_awaited_once_with(
            "abc1234", "2025-01-15T09:00:00", confirmed=False, allow_pushed=False, limit=100
        )

    def test_set_flags_forwarded(self, app, runner):
        app.session_service.run_once.return_value = RunResult.succeeded(CHANGED)

        result = runner.invoke(
            cli_module.cli, ["set", "--all", "--no-confirm", "abc1234", "2025-01-15T09:00:00"]
        )

        assert result.exit_code == 0
        assert "Success: Changed date for commit abc1234" in result.output
        app.session_service.run_once.assert_awaited_once_with(
            "abc1234", "2025-01-15T09:00:00", confirmed=True, allow_pushed=True, limit=100
        )

    def test_set_failure_exit_status(self, app, runner):
        app.session_service.run_once.return_value = RunResult.failed(
            ErrorCode.COMMIT_NOT_FOUND, "Commit abc1234 not found"
        )

        result = runner.invoke(cli_module.cli, ["set", "abc1234", "2025-01-15T09:00:00", "--json"])

        assert result.exit_code == 1
        assert json.loads(result.output)["errorCode"] == "COMMIT_NOT_FOUND"

    def test_set_requires_both_arguments(self, app, runner):
        result = runner.invoke(cli_module.cli, ["set", "abc1234"])

        assert result.exit_code == 2
        app.session_service.run_once.assert_not_awaited()

    def test_set_uses_configured_allow_pushed(self, app, runner):
        app.config.general.allow_pushed = True
        app.session_service.run_once.return_value = RunResult.succeeded(CHANGED)

        runner.invoke(cli_module.cli, ["set", "abc1234", "2025-01-15T09:00:00"])

        assert app.session_service.run_once.await_args.kwargs["allow_pushed"] is True

    def test_interactive(self, app, runner):
        app.session_service.run_interactive.return_value = 0

        result = runner.invoke(cli_module.cli, ["interactive", "--all", "--count", "3"])

        assert result.exit_code == 0
        args = app.session_service.run_interactive.await_args.args
        assert args[1] == CommitScope.ALL
        assert args[2] == 3
        assert "Goodbye!" in result.output

    def test_interactive_defaults_from_config(self, app, runner):
        app.session_service.run_interactive.return_value = 0

        runner.invoke(cli_module.cli, ["interactive"])

        args = app.session_service.run_interactive.await_args.args
        assert args[1] == CommitScope.UNPUSHED
        assert args[2] == app.config.general.count


class TestConfigErrors:
    """Configuration problems end as usage errors, not tracebacks."""

    def test_bad_env_value_on_list(self, runner, tmp_path):
        result = runner.invoke(
            cli_module.cli,
            ["--config", str(tmp_path / "missing.toml"), "list"],
            env={"COMMIT_DATE_COUNT": "many"},
        )

        assert result.exit_code == 2
        assert "COMMIT_DATE_COUNT must be an integer" in result.output
        assert not isinstance(result.exception, ValueError)

    def test_malformed_toml_on_list(self, runner, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[general\ncount = 5\n")

        result = runner.invoke(cli_module.cli, ["--config", str(path), "list"])

        assert result.exit_code == 2
        assert not isinstance(result.exception, ValueError)

    def test_zero_count_in_file(self, runner, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[general]\ncount = 0\n")

        result = runner.invoke(cli_module.cli, ["--config", str(path)])

        assert result.exit_code == 2
        assert "general.count must be positive" in result.output
