"""Named query catalog.

An immutable id -> query mapping built once at startup, either from the
built-in analytics queries or from a TOML file of `[[queries]]` tables:

    [[queries]]
    id = "top_orders"
    name = "Top 10 Orders by Total"
    description = "Highest value orders with customer details"
    sql = "SELECT ..."
"""

from __future__ import annotations

import tomllib
from types import MappingProxyType
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from athena_tool.core.exceptions import ConfigError, NotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping
    from pathlib import Path


class NamedQueryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    sql: str = Field(min_length=1)

    def summary(self) -> dict[str, str]:
        """Listing view without the SQL text."""
        return {"id": self.id, "name": self.name, "description": self.description}


_TOP_ORDERS_SQL = """\
SELECT
    o.order_id,
    o.customer_id,
    c.customer_name,
    c.email,
    o.order_date,
    o.order_total,
    o.status
FROM orders o
JOIN customers c ON o.customer_id = c.customer_id
ORDER BY o.order_total DESC
LIMIT 10"""

_RETURNS_BY_CUSTOMER_SQL = """\
SELECT
    c.customer_id,
    c.customer_name,
    c.email,
    c.registration_date,
    r.return_id,
    r.order_id,
    r.return_date,
    r.return_reason,
    r.refund_amount,
    CASE
        WHEN r.return_id IS NOT NULL THEN 'Has Returns'
        ELSE 'No Returns'
    END AS return_status
FROM customers c
LEFT JOIN orders o ON c.customer_id = o.customer_id
LEFT JOIN returns r ON o.order_id = r.order_id
ORDER BY c.customer_name, r.return_date DESC"""

_RETURNED_ORDERS_SQL = """\
SELECT
    o.order_id,
    o.customer_id,
    c.customer_name,
    o.order_date,
    o.order_total,
    o.status AS order_status,
    r.return_id,
    r.return_date,
    r.return_reason,
    r.refund_amount,
    (o.order_total - r.refund_amount) AS net_revenue,
    ROUND((r.refund_amount / o.order_total) * 100, 2) AS return_percentage
FROM orders o
INNER JOIN returns r ON o.order_id = r.order_id
INNER JOIN customers c ON o.customer_id = c.customer_id
ORDER BY o.order_date DESC, r.return_date DESC"""

BUILTIN_QUERIES: tuple[NamedQueryEntry, ...] = (
    NamedQueryEntry(
        id="top_orders",
        name="Top 10 Orders by Total",
        description="Highest value orders with customer and date information",
        sql=_TOP_ORDERS_SQL,
    ),
    NamedQueryEntry(
        id="returns_by_customer",
        name="Returns by Customer",
        description="All customers and their returns, if any (LEFT JOIN)",
        sql=_RETURNS_BY_CUSTOMER_SQL,
    ),
    NamedQueryEntry(
        id="returned_orders",
        name="Orders That Were Returned",
        description="Only orders with returns, including refund impact (INNER JOIN)",
        sql=_RETURNED_ORDERS_SQL,
    ),
)


class NamedQueryCatalog:
    """Read-only lookup of named queries by id."""

    def __init__(self, entries: Iterable[NamedQueryEntry]) -> None:
        by_id: dict[str, NamedQueryEntry] = {}
        for entry in entries:
            if entry.id in by_id:
                msg = f"Duplicate named query id: '{entry.id}'"
                raise ConfigError(msg)
            by_id[entry.id] = entry
        self._entries: Mapping[str, NamedQueryEntry] = MappingProxyType(by_id)

    def get(self, query_id: str) -> NamedQueryEntry:
        """Return the entry for query_id.

        Raises NotFoundError for unknown ids; there is no default query.
        """
        try:
            return self._entries[query_id]
        except KeyError:
            available = ", ".join(sorted(self._entries)) or "none"
            msg = f"Unknown named query: '{query_id}'. Available: {available}"
            raise NotFoundError(msg) from None

    def __contains__(self, query_id: object) -> bool:
        return query_id in self._entries

    def __iter__(self) -> Iterator[NamedQueryEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> Mapping[str, NamedQueryEntry]:
        return self._entries


def load_catalog(path: Path | None = None) -> NamedQueryCatalog:
    """Build the catalog from a TOML file, or the built-in queries if None."""
    if path is None:
        return NamedQueryCatalog(BUILTIN_QUERIES)

    if not path.exists():
        msg = f"Named queries file not found: {path}"
        raise ConfigError(msg)

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Malformed TOML in {path}: {e}"
        raise ConfigError(msg) from e

    raw_entries = data.get("queries", [])
    if not isinstance(raw_entries, list):
        msg = f"Invalid named queries file {path}: 'queries' must be an array of tables"
        raise ConfigError(msg)

    try:
        entries = [NamedQueryEntry.model_validate(raw) for raw in raw_entries]
    except ValidationError as e:
        msg = f"Invalid named query in {path}: {e}"
        raise ConfigError(msg) from e

    return NamedQueryCatalog(entries)
