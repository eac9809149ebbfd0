"""Result normalizer.

Assembles the engine's paginated results into a single ResultSet.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from athena_tool.core.exceptions import NetworkError
from athena_tool.core.logging import get_logger
from athena_tool.core.models import ExecutionStats, ResultSet

if TYPE_CHECKING:
    from collections.abc import Sequence

    from athena_tool.core.engine import QueryEngine
    from athena_tool.core.models import ColumnMeta


def strip_duplicate_header(
    columns: Sequence[ColumnMeta],
    rows: Sequence[list[str | None]],
) -> list[list[str | None]]:
    """Drop a leading row that repeats the column names.

    Athena returns the header as the first data row of the first page of
    a SELECT. Only rows[0] is considered and only an exact positional
    match removes it; matching rows further down are real data.
    """
    result = list(rows)
    if not result or not columns:
        return result

    first = result[0]
    names = [col.name for col in columns]
    if len(first) == len(names) and all(
        value == name for value, name in zip(first, names, strict=True)
    ):
        return result[1:]
    return result


async def fetch_result_set(
    engine: QueryEngine,
    handle: str,
    fallback_stats: ExecutionStats | None = None,
) -> ResultSet:
    """Fetch every page for a succeeded execution.

    Columns from the first page are authoritative. Any error while
    paging propagates, so a partial set is never returned.
    """
    log = get_logger("normalizer").bind(handle=handle)

    first = await engine.get_results(handle)
    columns = list(first.columns)
    rows = strip_duplicate_header(columns, first.rows)
    stats = first.stats or fallback_stats or ExecutionStats()
    pages = 1

    token = first.next_token
    seen_tokens: set[str] = set()
    while token:
        if token in seen_tokens:
            msg = f"Result pagination for {handle} did not advance (token repeated)"
            raise NetworkError(msg)
        seen_tokens.add(token)

        page = await engine.get_results(handle, token)
        rows.extend(page.rows)
        pages += 1
        token = page.next_token

    log.debug("results fetched", pages=pages, row_count=len(rows))
    return ResultSet(
        columns=columns,
        rows=rows,
        row_count=len(rows),
        stats=stats,
    )
