"""Interactive terminal prompts built on click."""

from __future__ import annotations

from datetime import datetime

import click

from commitdate.models.commit import Commit, CommitScope
from commitdate.models.rewrite import DateWindow
from commitdate.services.date_validator import DateValidator, format_date, same_minute
from commitdate.services.session_service import CycleResult, CycleStatus
from commitdate.ui.messages import MessageFormatter


def _is_yes(answer: str) -> bool:
    return answer.strip().lower() == "yes"


class ClickPrompter:
    """Prompter implementation for a plain terminal."""

    def __init__(self, formatter: MessageFormatter, validator: DateValidator) -> None:
        self._fmt = formatter
        self._validator = validator

    def confirm_pushed_mode(self) -> bool:
        click.echo(self._fmt.initial_warning())
        answer = click.prompt("Type 'yes' to continue", default="no", show_default=True)
        return _is_yes(answer)

    def select_commit(self, commits: list[Commit], allow_pushed: bool) -> Commit:
        click.echo(f"{self._fmt.style('Found commits:', fg='yellow')} {len(commits)}")
        click.echo("")
        unpushed = sum(1 for c in commits if not c.is_pushed)
        if allow_pushed and unpushed < len(commits):
            click.echo(self._fmt.style("=== Unpushed (safe to modify) ===", fg="green"))
            if unpushed == 0:
                click.echo(self._fmt.style("(no unpushed commits)", fg="bright_black"))
        pushed_header_shown = False
        for index, commit in enumerate(commits, start=1):
            if allow_pushed and commit.is_pushed and not pushed_header_shown:
                click.echo(self._fmt.style("=== Pushed (dangerous to modify) ===", fg="red"))
                pushed_header_shown = True
            click.echo(f"  {index}. {self._fmt.commit_label(commit)}")
        click.echo("")
        choice = click.prompt(
            "Select a commit", type=click.IntRange(1, len(commits)), default=1
        )
        selected = commits[choice - 1]
        click.echo(f"{self._fmt.style('Selected commit:', fg='green')} {selected.short_id}")
        return selected

    def confirm_pushed_commit(self, commit: Commit) -> bool:
        click.echo(self._fmt.commit_warning(commit))
        answer = click.prompt("Type 'yes' to modify this pushed commit", default="no")
        return _is_yes(answer)

    def prompt_new_date(self, commit: Commit, window: DateWindow) -> datetime:
        click.echo("")
        click.echo(f"{self._fmt.style('Current date:', fg='yellow')} {format_date(commit.author_date)}")
        click.echo(f"{self._fmt.style('Valid range:', fg='green')} {self._validator.format_window(window)}")
        if window.is_empty:
            click.echo(self._fmt.style(
                "Neighboring commits are out of order; no date fits. Keep the current date.",
                fg="red",
            ))
        click.echo("")

        def _convert(value: str) -> datetime:
            parsed = self._validator.parse_date(value)
            if parsed is None:
                raise click.BadParameter(self._validator.validate_format(value).reason or "Could not parse date")
            if same_minute(parsed, commit.author_date):
                return parsed
            outcome = self._validator.validate(parsed, window.lower_bound, window.upper_bound)
            if not outcome.valid:
                raise click.BadParameter(outcome.reason)
            return parsed

        return click.prompt(
            "New date (ISO 8601, UTC)",
            default=format_date(commit.author_date)[:16],
            value_proc=_convert,
        )

    def confirm_changes(self, commit: Commit, new_date: datetime) -> bool:
        click.echo("")
        click.echo(self._fmt.style("Preview:", fg="yellow"))
        click.echo(f'  Commit:   {self._fmt.style(commit.short_id, fg="cyan")} "{commit.message}"')
        if commit.is_pushed:
            click.echo(
                f"  Status:   {self._fmt.style('PUSHED', fg='yellow')} "
                f"{self._fmt.style('in ' + ', '.join(commit.remote_refs), fg='bright_black')}"
            )
        click.echo(f"  Old date: {format_date(commit.author_date)}")
        click.echo(f"  New date: {self._fmt.style(format_date(new_date), fg='green')}")
        click.echo(f"  Changes:  {self._fmt.style('author date and committer date', fg='bright_black')}")
        if commit.is_pushed:
            click.echo(self._fmt.final_warning(commit))
            answer = click.prompt("LAST WARNING. Type 'yes' to apply", default="no")
            return _is_yes(answer)
        click.echo("")
        return click.confirm("Apply changes?", default=True)

    def ask_continue(self) -> bool:
        return click.confirm("Change another commit?", default=False)

    def show_no_commits(self, scope: CommitScope) -> None:
        if scope == CommitScope.UNPUSHED:
            click.echo(self._fmt.style("No unpushed commits found.", fg="yellow"))
            click.echo("")
            click.echo(self._fmt.style(
                "Use --allow-pushed to work with pushed commits.", fg="bright_black"
            ))
        else:
            click.echo(self._fmt.style("No commits found.", fg="yellow"))

    def show_result(self, result: CycleResult) -> None:
        click.echo("")
        if result.status == CycleStatus.COMMITTED:
            click.echo(self._fmt.style("Commit date changed.", fg="green"))
            if result.commit.is_pushed:
                click.echo(self._fmt.post_change_instructions(result.commit))
        elif result.status == CycleStatus.UNCHANGED:
            click.echo(self._fmt.style("Date unchanged, nothing to do.", fg="yellow"))
        elif result.status == CycleStatus.CANCELLED:
            click.echo(self._fmt.style("Change cancelled.", fg="bright_black"))
        else:
            self.show_error(result.error)
        click.echo("")

    def show_error(self, message: str) -> None:
        click.echo("", err=True)
        click.echo(f"{self._fmt.style('Error:', fg='red')} {message}", err=True)
        click.echo("", err=True)
