"""Query request, result and outcome models for Athena Tool.

Pydantic models for the values exchanged between the dispatcher, the
query engine adapter, the normalizer and callers, plus the mutable
Execution record driven by the poller.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from athena_tool.core.exceptions import ErrorKind


class _CamelModel(BaseModel):
    """Serializes with camelCase aliases for the dashboard API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ColumnMeta(_CamelModel):
    """Metadata for a single result column."""

    name: str
    type: str = "varchar"


class ExecutionStats(_CamelModel):
    execution_time_ms: int = 0
    bytes_scanned: int = 0


class ResultSet(_CamelModel):
    """Normalized result of a succeeded execution.

    Rows keep engine order; values are strings, None for SQL NULL.
    """

    columns: list[ColumnMeta]
    rows: list[list[str | None]]
    row_count: int
    stats: ExecutionStats = ExecutionStats()


class CustomQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["custom"] = "custom"
    sql: str


class NamedQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["named"] = "named"
    id: str


QueryRequest = CustomQuery | NamedQuery


class EngineStatus(BaseModel):
    """One status observation returned by QueryEngine.get_status()."""

    state: str
    reason: str | None = None
    stats: ExecutionStats | None = None


class ResultPage(BaseModel):
    """One page returned by QueryEngine.get_results()."""

    columns: list[ColumnMeta]
    rows: list[list[str | None]]
    next_token: str | None = None
    stats: ExecutionStats | None = None


class QueryError(_CamelModel):
    kind: ErrorKind
    message: str


class QueryOutcome(_CamelModel):
    """Exactly one of data (success) or error (failure) is populated."""

    success: bool
    data: ResultSet | None = None
    error: QueryError | None = None

    @model_validator(mode="after")
    def check_variant(self) -> QueryOutcome:
        if self.success and (self.data is None or self.error is not None):
            msg = "successful outcome requires data and no error"
            raise ValueError(msg)
        if not self.success and (self.error is None or self.data is not None):
            msg = "failed outcome requires an error and no data"
            raise ValueError(msg)
        return self

    @classmethod
    def ok(cls, result: ResultSet) -> QueryOutcome:
        return cls(success=True, data=result)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> QueryOutcome:
        return cls(success=False, error=QueryError(kind=kind, message=message))

    def to_response(self) -> dict[str, object]:
        """Render as the `{success, data | error}` response body."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ExecutionState(StrEnum):
    QUEUED = "Queued"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    CANCELLED = "Cancelled"
    TIMED_OUT = "TimedOut"


TERMINAL_STATES = frozenset(
    {
        ExecutionState.SUCCEEDED,
        ExecutionState.FAILED,
        ExecutionState.CANCELLED,
        ExecutionState.TIMED_OUT,
    }
)


@dataclass
class Execution:
    """In-flight execution owned by a single request; mutated only by the poller."""

    handle: str
    submitted_at: float
    state: ExecutionState = ExecutionState.QUEUED
    last_polled_at: float | None = None
    attempts: int = 0
    reason: str | None = None
    stats: ExecutionStats | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES
