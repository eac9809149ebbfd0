"""Tests for JSONFormatter."""

import json

import pytest

from athena_tool.formatters.base import Formatter
from athena_tool.formatters.json import JSONFormatter
from tests.formatters._results import make_result


@pytest.mark.unit
def test_json_formatter_implements_protocol():
    assert isinstance(JSONFormatter(), Formatter)


@pytest.mark.unit
def test_json_formatter_rows_as_objects():
    output = "\n".join(JSONFormatter().format(make_result()))
    assert json.loads(output) == [
        {"order_id": "1001", "status": "shipped"},
        {"order_id": "1002", "status": None},
    ]


@pytest.mark.unit
def test_json_formatter_keeps_values_as_strings():
    output = "\n".join(JSONFormatter().format(make_result()))
    assert json.loads(output)[0]["order_id"] == "1001"


@pytest.mark.unit
def test_json_formatter_compact_is_single_line():
    lines = list(JSONFormatter(compact=True).format(make_result()))
    assert len(lines) == 1
    assert "\n" not in lines[0]


@pytest.mark.unit
def test_json_formatter_empty_result():
    assert list(JSONFormatter().format(make_result(rows=[]))) == ["[]"]
