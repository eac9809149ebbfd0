"""Rich table output for interactive terminals."""

from __future__ import annotations

import shutil
from io import StringIO
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from athena_tool.formatters.base import registry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from athena_tool.core.models import ColumnMeta, ResultSet

# Athena type names whose values read better right-aligned.
_NUMERIC_TYPES = frozenset(
    {
        "tinyint",
        "smallint",
        "integer",
        "int",
        "bigint",
        "real",
        "float",
        "double",
        "decimal",
    }
)


def _is_numeric(column: ColumnMeta) -> bool:
    return column.type.split("(", 1)[0].lower() in _NUMERIC_TYPES


def _cell(value: str | None, width: int) -> str:
    if value is None:
        return ""
    if len(value) > width:
        return value[: width - 1] + "…"
    return value


@registry.register("table")
class TableFormatter:
    def __init__(self, width: int = 40) -> None:
        self.width = width

    def format(self, result: ResultSet) -> Iterator[str]:
        if not result.rows:
            yield "No results"
            return

        table = Table()
        for column in result.columns:
            table.add_column(
                column.name,
                justify="right" if _is_numeric(column) else "left",
                no_wrap=True,
            )
        for row in result.rows:
            table.add_row(*(_cell(value, self.width) for value in row))

        columns, _ = shutil.get_terminal_size((120, 24))
        buf = StringIO()
        Console(file=buf, force_terminal=True, width=columns).print(table)
        yield buf.getvalue().rstrip("\n")
