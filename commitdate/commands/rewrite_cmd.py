"""CLI handlers for the interactive and single-shot rewrite modes."""

from __future__ import annotations

import click

from commitdate.commands._helpers import _run, ensure_ready, fail, get_context
from commitdate.context import AppContext
from commitdate.models.commit import CommitScope
from commitdate.models.result import ErrorCode


def run_single(
    app: AppContext,
    commit_hash: str | None,
    date: str | None,
    no_confirm: bool,
    as_json: bool,
    allow_pushed: bool,
) -> None:
    """Change one commit's date without prompting and exit with the result status."""
    if not commit_hash or not date:
        fail(
            "Both --hash and --date are required for CLI mode",
            ErrorCode.MISSING_REQUIRED_OPTIONS,
            as_json,
        )
    ensure_ready(app, as_json)

    result = _run(
        app.session_service.run_once(
            commit_hash,
            date,
            confirmed=no_confirm,
            allow_pushed=allow_pushed,
            limit=app.config.general.lookup_limit,
        )
    )
    if as_json:
        click.echo(result.to_json())
    else:
        click.echo(result.summary(), err=not result.success)
    if result.exit_code:
        raise SystemExit(result.exit_code)


def run_interactive(app: AppContext, allow_pushed: bool, count: int) -> None:
    """Prompt for commits and dates until the user stops."""
    from commitdate.ui.prompts import ClickPrompter

    ensure_ready(app)
    prompter = ClickPrompter(app.formatter, app.validator)
    scope = CommitScope.for_flag(allow_pushed)
    try:
        changed = _run(app.session_service.run_interactive(prompter, scope, count))
    except click.Abort:
        click.echo("")
        click.echo(app.formatter.style("Operation cancelled.", fg="bright_black"))
        return
    if changed:
        click.echo(f"Changed {changed} commit date(s).")
    click.echo(app.formatter.style("Goodbye!", fg="yellow"))


@click.command("interactive")
@click.option("--allow-pushed", "--all", "allow_pushed", is_flag=True, help="Allow modification of pushed commits")
@click.option("--count", type=click.IntRange(min=1), default=None, help="Number of commits to display")
@click.pass_context
def interactive_command(ctx: click.Context, allow_pushed: bool, count: int | None):
    """Pick commits and change their dates interactively."""
    app = get_context(ctx)
    run_interactive(
        app,
        allow_pushed or app.config.general.allow_pushed,
        count or app.config.general.count,
    )


@click.command("set")
@click.argument("commit_hash", metavar="HASH")
@click.argument("date", metavar="DATE")
@click.option("--allow-pushed", "--all", "allow_pushed", is_flag=True, help="Allow modification of pushed commits")
@click.option("--no-confirm", is_flag=True, help="Skip all confirmations (USE WITH CAUTION)")
@click.option("--json", "as_json", is_flag=True, help="Output result in JSON format")
@click.pass_context
def set_command(
    ctx: click.Context,
    commit_hash: str,
    date: str,
    allow_pushed: bool,
    no_confirm: bool,
    as_json: bool,
):
    """Change the date of commit HASH to DATE (ISO 8601) without prompting."""
    app = get_context(ctx)
    run_single(
        app,
        commit_hash,
        date,
        no_confirm,
        as_json,
        allow_pushed or app.config.general.allow_pushed,
    )
