from __future__ import annotations

from typing import Annotated

import typer
import uvicorn

from athena_tool.api.app import create_app
from athena_tool.cli.commands._shared import cli_state, get_config
from athena_tool.core.logging import setup_logging


def serve_command(
    ctx: typer.Context,
    host: Annotated[
        str,
        typer.Option("--host", help="Interface to bind"),
    ] = "127.0.0.1",
    port: Annotated[
        int,
        typer.Option("--port", help="Port to listen on"),
    ] = 3000,
) -> None:
    """Serve the dashboard query API over HTTP."""
    config = get_config(ctx)
    setup_logging(cli_state(ctx).verbose, json_logs=True)
    typer.echo(f"Serving Athena Tool API on http://{host}:{port}", err=True)
    uvicorn.run(create_app(config), host=host, port=port, log_level="warning")
