"""Shared CLI formatting helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from athena_tool.core.models import ResultSet


def fmt_size(b: int | None) -> str:
    """Format bytes as human-readable size for status output."""
    if not b:
        return "0B"
    units = [("TB", 1 << 40), ("GB", 1 << 30), ("MB", 1 << 20), ("KB", 1 << 10)]
    for suffix, threshold in units:
        if b >= threshold:
            value = b / threshold
            return f"{value:.0f} {suffix}" if value >= 10 else f"{value:.1f} {suffix}"
    return f"{b}B"


def format_duration_ms(ms: int | None) -> str:
    """Format engine execution time: 845 ms, 3.2s, 4m 05s."""
    if not ms:
        return "0 ms"
    if ms < 1000:
        return f"{ms} ms"
    seconds = ms / 1000
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}m {secs:02d}s"


def format_stats_line(result: ResultSet) -> str:
    rows = result.row_count
    return (
        f"{rows} row{'s' if rows != 1 else ''} "
        f"({format_duration_ms(result.stats.execution_time_ms)}, "
        f"{fmt_size(result.stats.bytes_scanned)} scanned)"
    )
