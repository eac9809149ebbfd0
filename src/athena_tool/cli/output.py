"""Output format selection and result writing."""

from __future__ import annotations

import sys
from enum import StrEnum
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from athena_tool.core.models import ResultSet
    from athena_tool.formatters.base import Formatter


class OutputFormat(StrEnum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


# Which CLI format option each formatter accepts.
_FORMAT_OPTIONS: dict[str, str] = {
    OutputFormat.TABLE: "width",
    OutputFormat.JSON: "compact",
    OutputFormat.CSV: "no_header",
}


def stdout_is_terminal() -> bool:
    return sys.stdout.isatty()


def resolve_format(explicit: str | None, configured: str | None = None) -> str:
    """Pick the output format name.

    An explicit --format wins, then default_format from the config file.
    Otherwise a terminal gets a table and a pipe gets CSV.
    """
    if explicit is not None:
        return explicit
    if configured is not None:
        return configured
    return OutputFormat.TABLE if stdout_is_terminal() else OutputFormat.CSV


def get_formatter(
    name: str,
    *,
    compact: bool = False,
    width: int = 40,
    no_header: bool = False,
) -> Formatter:
    """Instantiate the formatter registered as `name` with its own option."""
    from athena_tool.formatters import registry

    available = {"width": width, "compact": compact, "no_header": no_header}
    option = _FORMAT_OPTIONS.get(name)
    options = {option: available[option]} if option else {}
    return registry.get(name, **options)


def write_output(
    formatter: Formatter, result: ResultSet, stream: TextIO | None = None
) -> None:
    out = stream if stream is not None else sys.stdout
    for line in formatter.format(result):
        out.write(f"{line}\n")
    out.flush()
