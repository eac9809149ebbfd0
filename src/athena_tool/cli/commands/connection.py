from __future__ import annotations

import asyncio

import typer

from athena_tool.cli.commands._shared import get_config
from athena_tool.core.client import AthenaClient


def test_connection_command(ctx: typer.Context) -> None:
    """Check that the configured Athena workgroup is reachable."""
    config = get_config(ctx)
    with AthenaClient(config) as client:
        info = asyncio.run(client.check_connection())

    typer.echo(f"Connected to Athena in {info['region']}")
    typer.echo(f"  workgroup: {info['workgroup']} ({info['state']})")
    typer.echo(f"  database: {config.database}")
    typer.echo(f"  output location: {info['output_location'] or 'workgroup default'}")
