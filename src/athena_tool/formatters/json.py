"""JSON array-of-objects output.

Athena hands back every value as text, so values stay JSON strings (or
null) rather than being guessed into numbers.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from athena_tool.formatters.base import registry

if TYPE_CHECKING:
    from collections.abc import Iterator

    from athena_tool.core.models import ResultSet


@registry.register("json")
class JSONFormatter:
    def __init__(self, compact: bool = False) -> None:
        self.compact = compact

    def format(self, result: ResultSet) -> Iterator[str]:
        names = [col.name for col in result.columns]
        records = [dict(zip(names, row, strict=True)) for row in result.rows]
        yield json.dumps(records, indent=None if self.compact else 2)
