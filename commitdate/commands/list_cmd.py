"""CLI handler for listing commits with their push status."""

from __future__ import annotations

import json

import click

from commitdate.commands._helpers import _run, fail, get_context
from commitdate.errors import GitError
from commitdate.models.commit import CommitScope
from commitdate.models.result import ErrorCode


@click.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include pushed commits")
@click.option("--count", "-n", type=click.IntRange(min=1), default=None, help="Number of commits")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def list_command(ctx: click.Context, show_all: bool, count: int | None, as_json: bool):
    """List recent commits and whether they were pushed."""
    app = get_context(ctx)
    scope = CommitScope.for_flag(show_all)
    limit = count or app.config.general.count

    try:
        commits = _run(app.commit_service.list_commits(scope, limit))
    except GitError as e:
        fail(str(e), ErrorCode.EXECUTION_ERROR, as_json)

    if as_json:
        click.echo(json.dumps([c.to_dict() for c in commits], indent=2, ensure_ascii=False))
        return
    if not commits:
        click.echo("No unpushed commits found." if scope == CommitScope.UNPUSHED else "No commits found.")
        return
    for c in commits:
        click.echo(f"  {app.formatter.commit_label(c)}")
