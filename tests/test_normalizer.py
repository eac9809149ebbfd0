"""Tests for result normalization and pagination."""

import pytest

from athena_tool.core.exceptions import NetworkError
from athena_tool.core.models import ColumnMeta, ExecutionStats
from athena_tool.core.normalizer import fetch_result_set, strip_duplicate_header
from tests.fakes import FakeEngine, page

COLUMNS = [ColumnMeta(name="order_id"), ColumnMeta(name="order_total")]


class TestStripDuplicateHeader:
    @pytest.mark.unit
    def test_removes_repeated_header(self):
        rows = [["order_id", "order_total"], ["1", "99.50"]]
        assert strip_duplicate_header(COLUMNS, rows) == [["1", "99.50"]]

    @pytest.mark.unit
    def test_keeps_rows_without_header(self):
        rows = [["1", "99.50"], ["2", "10.00"]]
        assert strip_duplicate_header(COLUMNS, rows) == rows

    @pytest.mark.unit
    def test_partial_match_is_data(self):
        rows = [["order_id", "10.00"]]
        assert strip_duplicate_header(COLUMNS, rows) == rows

    @pytest.mark.unit
    def test_only_first_row_is_considered(self):
        rows = [["1", "99.50"], ["order_id", "order_total"]]
        assert strip_duplicate_header(COLUMNS, rows) == rows

    @pytest.mark.unit
    def test_length_mismatch_is_data(self):
        rows = [["order_id", "order_total", "extra"]]
        assert strip_duplicate_header(COLUMNS, rows) == rows

    @pytest.mark.unit
    def test_header_only_page_yields_no_rows(self):
        assert strip_duplicate_header(COLUMNS, [["order_id", "order_total"]]) == []

    @pytest.mark.unit
    def test_empty_rows(self):
        assert strip_duplicate_header(COLUMNS, []) == []

    @pytest.mark.unit
    def test_is_idempotent_for_data_rows(self):
        rows = [["order_id", "order_total"], ["1", "99.50"]]
        once = strip_duplicate_header(COLUMNS, rows)
        assert strip_duplicate_header(COLUMNS, once) == once

    @pytest.mark.unit
    def test_does_not_mutate_input(self):
        rows = [["order_id", "order_total"], ["1", "99.50"]]
        strip_duplicate_header(COLUMNS, rows)
        assert len(rows) == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_single_page_with_header():
    stats = ExecutionStats(execution_time_ms=845, bytes_scanned=1024)
    engine = FakeEngine(
        pages={
            None: page(
                ["order_id", "order_total"],
                [["order_id", "order_total"], ["1", "99.50"], ["2", None]],
                stats=stats,
            )
        }
    )

    result = await fetch_result_set(engine, "exec-1")

    assert [c.name for c in result.columns] == ["order_id", "order_total"]
    assert result.rows == [["1", "99.50"], ["2", None]]
    assert result.row_count == 2
    assert result.stats == stats


@pytest.mark.unit
@pytest.mark.asyncio
async def test_follows_pages_in_order():
    names = ["n"]
    engine = FakeEngine(
        pages={
            None: page(names, [["n"], ["1"], ["2"]], next_token="t1"),
            "t1": page(names, [["3"], ["n"]], next_token="t2"),
            "t2": page(names, [["4"]]),
        }
    )

    result = await fetch_result_set(engine, "exec-1")

    # "n" on a later page is a real value, not a header.
    assert result.rows == [["1"], ["2"], ["3"], ["n"], ["4"]]
    assert result.row_count == 5
    assert engine.count("get_results") == 3


@pytest.mark.unit
@pytest.mark.asyncio
async def test_falls_back_to_status_stats():
    fallback = ExecutionStats(execution_time_ms=10, bytes_scanned=20)
    engine = FakeEngine(pages={None: page(["n"], [["n"], ["1"]])})

    result = await fetch_result_set(engine, "exec-1", fallback)

    assert result.stats == fallback


@pytest.mark.unit
@pytest.mark.asyncio
async def test_missing_stats_default_to_zero():
    engine = FakeEngine(pages={None: page(["n"], [["n"]])})

    result = await fetch_result_set(engine, "exec-1")

    assert result.row_count == 0
    assert result.stats == ExecutionStats()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_page_error_returns_no_partial_result():
    engine = FakeEngine(
        pages={
            None: page(["n"], [["n"], ["1"]], next_token="t1"),
            "t1": NetworkError("throttled"),
        }
    )

    with pytest.raises(NetworkError, match="throttled"):
        await fetch_result_set(engine, "exec-1")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_repeated_token_is_an_error():
    engine = FakeEngine(
        pages={
            None: page(["n"], [["n"]], next_token="loop"),
            "loop": page(["n"], [["1"]], next_token="loop"),
        }
    )

    with pytest.raises(NetworkError, match="did not advance"):
        await fetch_result_set(engine, "exec-1")
