"""CLI helpers shared by the commit-date commands."""

from __future__ import annotations

import asyncio

import click

from commitdate.context import AppContext
from commitdate.errors import PreconditionError
from commitdate.models.result import ErrorCode, RunResult


def _run(coro):
    """Run an async function from sync context."""
    return asyncio.run(coro)


def get_context(click_ctx: click.Context) -> AppContext:
    """Return the AppContext for this invocation, creating it on first use.

    Invalid configuration is reported as a usage error instead of a traceback.
    """
    obj = click_ctx.find_root().ensure_object(dict)
    app = obj.get("app")
    if app is None:
        try:
            app = AppContext(config_path=obj.get("config_path"))
        except ValueError as e:
            raise click.UsageError(str(e), ctx=click_ctx) from e
        obj["app"] = app
    return app


def fail(message: str, code: ErrorCode | str, as_json: bool = False) -> None:
    """Print an error (plain or structured) and exit with status 1."""
    if as_json:
        result = RunResult.failed(ErrorCode(code), message)
        click.echo(result.to_json())
    else:
        click.echo(f"Error: {message}", err=True)
    raise SystemExit(1)


def ensure_ready(app: AppContext, as_json: bool = False) -> None:
    """Exit unless the working tree is a clean git repository."""
    try:
        _run(app.check_preconditions())
    except PreconditionError as e:
        fail(str(e), e.code, as_json)
