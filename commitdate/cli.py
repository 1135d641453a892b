"""Click CLI definitions - main entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from commitdate.commands._helpers import get_context
from commitdate.commands.config_cmd import config_group
from commitdate.commands.list_cmd import list_command
from commitdate.commands.rewrite_cmd import (
    interactive_command,
    run_interactive,
    run_single,
    set_command,
)


@click.group(invoke_without_command=True)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
    default=None, help="Path to config file",
)
@click.option("--allow-pushed", "--all", "allow_pushed", is_flag=True, help="Allow modification of pushed commits")
@click.option("--count", type=click.IntRange(min=1), default=None, help="Number of commits to display")
@click.option("--hash", "commit_hash", default=None, help="Commit hash to change (CLI mode)")
@click.option("--date", "-d", default=None, help="New date in ISO 8601 format (CLI mode)")
@click.option("--no-confirm", is_flag=True, help="Skip all confirmations (USE WITH CAUTION)")
@click.option("--json", "as_json", is_flag=True, help="Output result in JSON format")
@click.version_option(package_name="commit-date")
@click.pass_context
def cli(
    ctx,
    debug: bool,
    config_path: Path | None,
    allow_pushed: bool,
    count: int | None,
    commit_hash: str | None,
    date: str | None,
    no_confirm: bool,
    as_json: bool,
) -> None:
    """commit-date - safely change the date of a Git commit.

    Without --hash/--date, runs interactively in the current repository.
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = config_path

    if ctx.invoked_subcommand is not None:
        return

    app = get_context(ctx)
    allow_pushed = allow_pushed or app.config.general.allow_pushed

    if commit_hash or date:
        run_single(app, commit_hash, date, no_confirm, as_json, allow_pushed)
        return
    run_interactive(app, allow_pushed, count or app.config.general.count)


cli.add_command(interactive_command, "interactive")
cli.add_command(set_command, "set")
cli.add_command(list_command, "list")
cli.add_command(config_group, "config")


if __name__ == "__main__":
    cli()
