"""Query engine protocol.

The orchestrator depends only on this asynchronous job-submission
interface; AthenaClient is the production implementation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from athena_tool.core.models import EngineStatus, ResultPage


@runtime_checkable
class QueryEngine(Protocol):
    """Protocol for an asynchronous, handle-based SQL engine.

    Implementations must be safe to share between concurrent requests
    and must raise AthenaToolError subclasses rather than transport
    exceptions.
    """

    async def submit(self, sql: str) -> str:
        """Start executing sql and return the execution handle."""
        ...

    async def get_status(self, handle: str) -> EngineStatus:
        """Return the engine-reported state of an execution."""
        ...

    async def get_results(
        self, handle: str, page_token: str | None = None
    ) -> ResultPage:
        """Fetch one page of results for a succeeded execution."""
        ...

    async def cancel(self, handle: str) -> None:
        """Ask the engine to stop an execution (best effort)."""
        ...

    def close(self) -> None:
        """Release transport resources; the engine is unusable afterwards."""
        ...
