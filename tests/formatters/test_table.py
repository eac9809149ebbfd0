"""Tests for TableFormatter."""

import pytest

from athena_tool.core.models import ColumnMeta
from athena_tool.formatters.base import Formatter
from athena_tool.formatters.table import TableFormatter
from tests.formatters._results import make_result


@pytest.mark.unit
def test_table_formatter_implements_protocol():
    assert isinstance(TableFormatter(), Formatter)


@pytest.mark.unit
def test_table_formatter_contains_headers_and_values():
    output = "\n".join(TableFormatter().format(make_result()))
    assert "order_id" in output
    assert "shipped" in output
    assert "1002" in output


@pytest.mark.unit
def test_table_formatter_no_results():
    assert list(TableFormatter().format(make_result(rows=[]))) == ["No results"]


@pytest.mark.unit
def test_table_formatter_truncates_wide_values():
    result = make_result(columns=[ColumnMeta(name="sql")], rows=[["x" * 100]])
    output = "\n".join(TableFormatter(width=10).format(result))
    assert "x" * 9 + "…" in output
    assert "x" * 11 not in output


@pytest.mark.unit
def test_table_formatter_right_aligns_numeric_columns():
    result = make_result(
        columns=[ColumnMeta(name="order_total", type="decimal(10,2)")],
        rows=[["5.00"], ["1250.00"]],
    )
    lines = "\n".join(TableFormatter().format(result)).splitlines()
    short = next(line for line in lines if "5.00" in line and "1250" not in line)
    long = next(line for line in lines if "1250.00" in line)
    assert short.index("5.00") + len("5.00") == long.index("1250.00") + len("1250.00")


@pytest.mark.unit
def test_table_formatter_null_is_blank():
    result = make_result(rows=[["1001", None]])
    output = "\n".join(TableFormatter().format(result))
    assert "None" not in output
