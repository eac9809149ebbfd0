"""Where the CLI's SQL text comes from.

`-e` inline text wins over a file argument, which wins over piped stdin.
Validation of the text itself (empty, too long) happens in the dispatcher.
"""

from __future__ import annotations

import sys
from pathlib import Path

from athena_tool.core.exceptions import InvalidRequestError


def read_query_file(file_path: str) -> str:
    """Read a .sql file, tolerating the BOM some editors write."""
    path = Path(file_path)
    if path.is_dir():
        msg = f"Query path is a directory, not a file: {file_path}"
        raise InvalidRequestError(msg)
    try:
        return path.read_text(encoding="utf-8-sig")
    except FileNotFoundError:
        msg = (
            f"Query file not found: {file_path}\n"
            "Use -e for inline SQL, --named for a catalog query, or pipe via stdin."
        )
        raise InvalidRequestError(msg) from None
    except UnicodeDecodeError as e:
        msg = f"Query file is not valid UTF-8: {file_path}"
        raise InvalidRequestError(msg) from e


def resolve_query_source(inline: str | None, file_path: str | None) -> str:
    if inline is not None:
        return inline
    if file_path is not None:
        return read_query_file(file_path)
    if not sys.stdin.isatty():
        return sys.stdin.read()

    msg = "No query provided. Use -e, --named, file path, or pipe to stdin."
    raise InvalidRequestError(msg)
