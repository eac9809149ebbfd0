"""Output formatters for Athena Tool.

Importing this package registers every formatter with `registry`.
"""

from athena_tool.formatters.base import Formatter, FormatterRegistry, registry
from athena_tool.formatters.csv import CSVFormatter
from athena_tool.formatters.json import JSONFormatter
from athena_tool.formatters.table import TableFormatter

__all__ = [
    "CSVFormatter",
    "Formatter",
    "FormatterRegistry",
    "JSONFormatter",
    "TableFormatter",
    "registry",
]
