from __future__ import annotations

from typing import Annotated

import typer

from athena_tool.cli.commands._shared import (
    apply_local_format_options,
    get_config,
    output_result,
)
from athena_tool.cli.output import OutputFormat  # noqa: TC001
from athena_tool.core.catalog import load_catalog
from athena_tool.core.models import ColumnMeta, ResultSet


def named_queries_command(
    ctx: typer.Context,
    show_sql: Annotated[
        bool,
        typer.Option("--sql", help="Include the SQL text of each query"),
    ] = False,
    format: Annotated[
        OutputFormat | None,
        typer.Option("--format", "-f", help="Output format: table|json|csv"),
    ] = None,
    compact: Annotated[
        bool,
        typer.Option("--compact", help="Compact JSON output (no indentation)"),
    ] = False,
    width: Annotated[
        int | None,
        typer.Option("--width", help="Column width for table format"),
    ] = None,
) -> None:
    """
    List the named queries available to `query --named`.

    Nothing is executed; this only reads the catalog.
    """
    apply_local_format_options(ctx, format=format, compact=compact, width=width)

    catalog = load_catalog(get_config(ctx).named_queries_file)

    names = ["id", "name", "description"] + (["sql"] if show_sql else [])
    rows: list[list[str | None]] = []
    for entry in catalog:
        row: list[str | None] = [entry.id, entry.name, entry.description]
        if show_sql:
            row.append(entry.sql)
        rows.append(row)

    result = ResultSet(
        columns=[ColumnMeta(name=name) for name in names],
        rows=rows,
        row_count=len(rows),
    )
    output_result(ctx, result)
