"""Submission dispatcher.

Turns an inbound request into a single validated SQL string. No SQL
parsing happens here; syntax errors surface later as engine failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from athena_tool.core.exceptions import InvalidRequestError
from athena_tool.core.models import CustomQuery, NamedQuery

if TYPE_CHECKING:
    from athena_tool.core.catalog import NamedQueryCatalog
    from athena_tool.core.models import QueryRequest

DEFAULT_MAX_QUERY_LENGTH = 262144


def parse_request(payload: Any) -> QueryRequest:
    """Build a QueryRequest from an inbound JSON payload.

    Accepts `{"sql": ...}` or `{"queryType": "named", "namedQueryId": ...}`.
    Raises InvalidRequestError for any other shape.
    """
    if not isinstance(payload, dict):
        msg = "Request body must be a JSON object"
        raise InvalidRequestError(msg)

    query_type = payload.get("queryType", "custom")
    has_sql = payload.get("sql") is not None
    has_named_id = payload.get("namedQueryId") is not None

    if has_sql and has_named_id:
        msg = "Request must contain either 'sql' or 'namedQueryId', not both"
        raise InvalidRequestError(msg)

    if query_type == "named":
        named_id = payload.get("namedQueryId")
        if not isinstance(named_id, str) or not named_id.strip():
            msg = "Named query requests require a non-empty 'namedQueryId'"
            raise InvalidRequestError(msg)
        return NamedQuery(id=named_id.strip())

    if query_type == "custom":
        sql = payload.get("sql")
        if not isinstance(sql, str):
            msg = "Custom query requests require a 'sql' string"
            raise InvalidRequestError(msg)
        return CustomQuery(sql=sql)

    msg = f"Unknown queryType: {query_type!r}. Expected 'custom' or 'named'"
    raise InvalidRequestError(msg)


def validate_sql(sql: str, max_length: int = DEFAULT_MAX_QUERY_LENGTH) -> str:
    """Return the trimmed SQL, rejecting empty or oversized text."""
    stripped = sql.strip()
    if not stripped:
        msg = "SQL query must not be empty"
        raise InvalidRequestError(msg)
    if len(stripped) > max_length:
        msg = (
            f"SQL query is too long: {len(stripped)} characters "
            f"(maximum {max_length})"
        )
        raise InvalidRequestError(msg)
    return stripped


def resolve_sql(
    request: QueryRequest,
    catalog: NamedQueryCatalog,
    max_length: int = DEFAULT_MAX_QUERY_LENGTH,
) -> str:
    """Resolve a request to the SQL text to submit.

    Named ids go through the catalog (NotFoundError when unknown); custom
    SQL goes through validate_sql().
    """
    if isinstance(request, NamedQuery):
        entry = catalog.get(request.id)
        return validate_sql(entry.sql, max_length)
    return validate_sql(request.sql, max_length)
