"""Tests for ClickPrompter with scripted terminal input."""

from __future__ import annotations

from datetime import datetime, timezone

import click
import pytest
from click.testing import CliRunner

from commitdate.models.commit import Commit
from commitdate.models.rewrite import DateWindow
from commitdate.services.date_validator import DateValidator
from commitdate.ui.messages import MessageFormatter
from commitdate.ui.prompts import ClickPrompter

NOW = datetime(2025, 1, 15, 10, 0, tzinfo=timezone.utc)


def _at(hour: int, minute: int = 0, second: int = 0) -> datetime:
    return datetime(2025, 1, 14, hour, minute, second, tzinfo=timezone.utc)


def _commit(sha_char: str, hour: int, pushed: bool = False) -> Commit:
    return Commit.create(
        sha_char * 40,
        f"commit {sha_char}",
        "Test Author",
        _at(hour),
        remote_refs=("origin/main",) if pushed else (),
    )


@pytest.fixture
def prompter():
    return ClickPrompter(MessageFormatter(color=False), DateValidator(clock=lambda: NOW))


def _answer(call, text: str):
    """Run ``call`` inside a click command fed with ``text`` on stdin."""
    captured = {}

    @click.command()
    def _cmd():
        captured["value"] = call()

    result = CliRunner().invoke(_cmd, input=text)
    assert result.exception is None, result.output
    return captured["value"], result.output


class TestPromptNewDate:
    WINDOW = DateWindow(lower_bound=_at(8), upper_bound=_at(12))

    def test_accepts_date_in_window(self, prompter):
        value, output = _answer(
            lambda: prompter.prompt_new_date(_commit("b", 10), self.WINDOW), "2025-01-14T09:00\n"
        )
        assert value == _at(9)
        assert "Valid range: 2025-01-14T08:00:00 .. 2025-01-14T12:00:00" in output

    def test_out_of_window_reprompts(self, prompter):
        value, output = _answer(
            lambda: prompter.prompt_new_date(_commit("b", 10), self.WINDOW),
            "2025-01-14T07:00\n2025-01-14T09:30\n",
        )
        assert "earlier than previous commit" in output
        assert value == _at(9, 30)

    def test_unparseable_reprompts(self, prompter):
        value, output = _answer(
            lambda: prompter.prompt_new_date(_commit("b", 10), self.WINDOW),
            "tomorrow\n2025-02-30T10:00\n2025-01-14T09:00\n",
        )
        assert "Invalid date format" in output
        assert "Could not parse date" in output
        assert value == _at(9)

    def test_same_minute_skips_window_check(self, prompter):
        out_of_order = DateWindow(lower_bound=_at(11), upper_bound=_at(9))
        value, output = _answer(
            lambda: prompter.prompt_new_date(_commit("b", 10), out_of_order),
            "2025-01-14T10:00:30\n",
        )
        assert value == _at(10, 0, 30)
        assert "out of order" in output

    def test_default_is_current_date(self, prompter):
        value, _ = _answer(
            lambda: prompter.prompt_new_date(_commit("b", 10), self.WINDOW), "\n"
        )
        assert value == _at(10)


class TestSelectCommit:
    def test_unpushed_only_has_no_headers(self, prompter):
        commits = [_commit("a", 12), _commit("b", 10)]
        value, output = _answer(lambda: prompter.select_commit(commits, False), "2\n")
        assert value is commits[1]
        assert "===" not in output
        assert "  2. bbbbbbb (2025-01-14 10:00) commit b" in output

    def test_pushed_header_before_first_pushed_commit(self, prompter):
        # Newest-first listing after merging from a remote interleaves the two kinds
        commits = [_commit("a", 12), _commit("b", 11, pushed=True), _commit("c", 10), _commit("d", 9, pushed=True)]
        value, output = _answer(lambda: prompter.select_commit(commits, True), "3\n")
        assert value is commits[2]
        assert output.count("=== Pushed (dangerous to modify) ===") == 1
        header = output.index("=== Pushed")
        assert output.index("1. aaaaaaa") < header < output.index("2. [pushed] bbbbbbb")

    def test_all_pushed(self, prompter):
        commits = [_commit("a", 12, pushed=True)]
        _, output = _answer(lambda: prompter.select_commit(commits, True), "\n")
        assert "(no unpushed commits)" in output
        assert output.index("=== Unpushed") < output.index("=== Pushed") < output.index("1. [pushed]")


class TestConfirmations:
    def test_pushed_commit_requires_literal_yes(self, prompter):
        commit = _commit("a", 12, pushed=True)
        assert _answer(lambda: prompter.confirm_pushed_commit(commit), "yes\n")[0] is True
        assert _answer(lambda: prompter.confirm_pushed_commit(commit), "y\n")[0] is False

    def test_pushed_mode_defaults_to_no(self, prompter):
        value, output = _answer(prompter.confirm_pushed_mode, "\n")
        assert value is False
        assert "WARNING: Pushed commit mode" in output

    def test_confirm_changes_for_unpushed(self, prompter):
        value, output = _answer(
            lambda: prompter.confirm_changes(_commit("b", 10), _at(9)), "\n"
        )
        assert value is True
        assert "Old date: 2025-01-14T10:00:00" in output
        assert "New date: 2025-01-14T09:00:00" in output

    def test_confirm_changes_for_pushed_shows_force_push(self, prompter):
        value, output = _answer(
            lambda: prompter.confirm_changes(_commit("b", 10, pushed=True), _at(9)), "yes\n"
        )
        assert value is True
        assert "git push --force-with-lease origin main" in output
