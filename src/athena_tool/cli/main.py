"""Athena Tool main entry point and command registration."""

from __future__ import annotations

import atexit
from pathlib import Path  # noqa: TC003
from typing import Annotated

import sentry_sdk
import typer

from athena_tool.__about__ import __version__
from athena_tool.cli.commands._shared import CliState
from athena_tool.cli.commands.config import config_app
from athena_tool.cli.commands.connection import test_connection_command
from athena_tool.cli.commands.named_queries import named_queries_command
from athena_tool.cli.commands.query import query_command
from athena_tool.cli.commands.serve import serve_command
from athena_tool.cli.output import OutputFormat  # noqa: TC001
from athena_tool.core.exceptions import AthenaToolError
from athena_tool.core.logging import setup_logging
from athena_tool.core.monitoring import setup_sentry

app = typer.Typer(
    help="Athena Tool - run analytical SQL on AWS Athena",
    no_args_is_help=True,
)

app.add_typer(config_app, name="config")
app.command("query")(query_command)
app.command("named-queries")(named_queries_command)
app.command("test-connection")(test_connection_command)
app.command("serve")(serve_command)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"athena-tool {__version__}")
        raise typer.Exit()


def _trace_invocation(command: str) -> None:
    """Wrap the whole CLI run in one Sentry transaction, finished at exit."""
    transaction = sentry_sdk.start_transaction(op="cli", name=command)
    transaction.__enter__()

    @atexit.register
    def _finish() -> None:
        transaction.__exit__(None, None, None)
        sentry_sdk.flush(timeout=2)


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging"),
    ] = False,
    profile: Annotated[
        str | None,
        typer.Option("--profile", "-P", help="Named Athena profile"),
    ] = None,
    region: Annotated[
        str | None,
        typer.Option("--region", "-r", help="AWS region"),
    ] = None,
    workgroup: Annotated[
        str | None,
        typer.Option("--workgroup", "-w", help="Athena workgroup"),
    ] = None,
    database: Annotated[
        str | None,
        typer.Option("--database", "-d", help="Glue database for unqualified tables"),
    ] = None,
    output_location: Annotated[
        str | None,
        typer.Option("--output-location", help="s3:// URI for query results"),
    ] = None,
    aws_profile: Annotated[
        str | None,
        typer.Option("--aws-profile", help="AWS credentials profile"),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config file"),
    ] = None,
    format: Annotated[
        OutputFormat | None,
        typer.Option("--format", "-f", help="Output format: table|json|csv"),
    ] = None,
    table: Annotated[
        bool,
        typer.Option("--table", help="Shorthand for --format table"),
    ] = False,
    compact: Annotated[
        bool,
        typer.Option("--compact", help="Single-line JSON output"),
    ] = False,
    width: Annotated[
        int,
        typer.Option("--width", help="Maximum cell width in table output"),
    ] = 40,
    no_header: Annotated[
        bool,
        typer.Option("--no-header", help="Omit the CSV header row"),
    ] = False,
) -> None:
    """Athena Tool - run analytical SQL on AWS Athena."""
    setup_logging(verbose)
    setup_sentry()
    _trace_invocation(ctx.invoked_subcommand or "athena-tool")

    connection_flags = {
        "region": region,
        "workgroup": workgroup,
        "database": database,
        "output_location": output_location,
        "aws_profile": aws_profile,
    }
    chosen_format = OutputFormat.TABLE if table else format
    ctx.obj = CliState(
        verbose=verbose,
        profile=profile,
        config_file=config_file,
        overrides={k: v for k, v in connection_flags.items() if v is not None},
        format=chosen_format.value if chosen_format else None,
        compact=compact,
        width=width,
        no_header=no_header,
    )


def run() -> None:
    """Console-script entry point: map errors to exit codes."""
    try:
        app()
    except AthenaToolError as e:
        sentry_sdk.capture_exception(e)
        typer.echo(f"Error: {e.message}", err=True)
        raise SystemExit(e.exit_code) from None
    except KeyboardInterrupt:
        raise SystemExit(130) from None
    except SystemExit:
        raise
    except Exception as e:
        sentry_sdk.capture_exception(e)
        typer.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None
