from __future__ import annotations

import asyncio
import sys
from typing import Annotated

import typer

from athena_tool.cli.commands._shared import get_orchestrator, output_result
from athena_tool.cli.helpers import format_stats_line
from athena_tool.core.exceptions import InvalidRequestError, error_for_kind
from athena_tool.core.exit_codes import ExitCode
from athena_tool.core.models import CustomQuery, NamedQuery
from athena_tool.core.query_source import resolve_query_source


def query_command(
    ctx: typer.Context,
    file: Annotated[
        str | None,
        typer.Argument(help="SQL file to execute"),
    ] = None,
    execute: Annotated[
        str | None,
        typer.Option("--execute", "-e", help="Execute inline SQL query"),
    ] = None,
    named: Annotated[
        str | None,
        typer.Option("--named", "-n", help="Execute a named query by id"),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option("--timeout", "-t", min=0.1, help="Query timeout in seconds"),
    ] = None,
) -> None:
    """Execute a SQL query from file, inline (-e), stdin, or the named catalog."""
    if named is not None and (execute is not None or file is not None):
        typer.echo("--named cannot be combined with -e or a query file", err=True)
        raise typer.Exit(ExitCode.USAGE_ERROR)

    try:
        is_tty = sys.stdin.isatty()
    except (ValueError, AttributeError):
        is_tty = False
    if named is None and execute is None and file is None and is_tty:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    if named is not None:
        request: CustomQuery | NamedQuery = NamedQuery(id=named)
    else:
        try:
            sql = resolve_query_source(inline=execute, file_path=file)
        except InvalidRequestError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(ExitCode.INPUT_ERROR) from exc
        request = CustomQuery(sql=sql)

    orchestrator = get_orchestrator(ctx, timeout=timeout)
    try:
        outcome = asyncio.run(orchestrator.execute(request))
    finally:
        orchestrator.close()

    if outcome.error is not None:
        raise error_for_kind(outcome.error.kind, outcome.error.message)

    if outcome.data is not None:
        output_result(ctx, outcome.data)
        typer.echo(format_stats_line(outcome.data), err=True)
