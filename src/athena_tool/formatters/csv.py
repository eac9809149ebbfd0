"""CSV output (RFC 4180). SQL NULL becomes an empty field."""

from __future__ import annotations

import csv
import io
from typing import TYPE_CHECKING

from athena_tool.formatters.base import registry

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from athena_tool.core.models import ResultSet


@registry.register("csv")
class CSVFormatter:
    def __init__(self, no_header: bool = False) -> None:
        self.no_header = no_header
        self._buffer = io.StringIO()
        self._writer = csv.writer(self._buffer, lineterminator="")

    def _line(self, values: Sequence[str | None]) -> str:
        self._buffer.seek(0)
        self._buffer.truncate()
        self._writer.writerow(["" if v is None else v for v in values])
        return self._buffer.getvalue()

    def format(self, result: ResultSet) -> Iterator[str]:
        if not self.no_header:
            yield self._line([col.name for col in result.columns])
        for row in result.rows:
            yield self._line(row)
