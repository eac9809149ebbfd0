"""Execution poller.

Drives one Execution from submission to a terminal state. Each iteration
makes exactly one status call and inspects it before deciding whether to
sleep, so a terminal state is never missed and never polled past.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from athena_tool.core.exceptions import (
    EngineFailureError,
    QueryCancelledError,
    QueryTimeoutError,
    UnknownStateError,
)
from athena_tool.core.logging import get_logger
from athena_tool.core.models import Execution, ExecutionState

if TYPE_CHECKING:
    from athena_tool.core.engine import QueryEngine

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]

# Engine state strings -> local states.
ENGINE_STATES: dict[str, ExecutionState] = {
    "QUEUED": ExecutionState.QUEUED,
    "RUNNING": ExecutionState.RUNNING,
    "SUCCEEDED": ExecutionState.SUCCEEDED,
    "FAILED": ExecutionState.FAILED,
    "CANCELLED": ExecutionState.CANCELLED,
}


@dataclass(frozen=True)
class PollPolicy:
    interval: float = 1.0
    timeout: float = 30.0
    max_attempts: int = 120

    def __post_init__(self) -> None:
        if self.interval <= 0:
            msg = f"interval must be > 0, got {self.interval}"
            raise ValueError(msg)
        if self.timeout <= 0:
            msg = f"timeout must be > 0, got {self.timeout}"
            raise ValueError(msg)
        if self.max_attempts < 1:
            msg = f"max_attempts must be >= 1, got {self.max_attempts}"
            raise ValueError(msg)


def start_execution(handle: str, clock: Clock = time.monotonic) -> Execution:
    """Create the Queued execution for a freshly accepted handle."""
    return Execution(handle=handle, submitted_at=clock())


def _timed_out(execution: Execution, reason: str) -> QueryTimeoutError:
    execution.state = ExecutionState.TIMED_OUT
    execution.reason = f"{reason}; the remote execution may still be running"
    return QueryTimeoutError(execution.reason)


def _settle(execution: Execution, reason: str | None) -> Execution:
    """Return a succeeded execution or raise for a failed or cancelled one."""
    if execution.state is ExecutionState.FAILED:
        execution.reason = reason or "Query failed without a reason"
        raise EngineFailureError(execution.reason)
    if execution.state is ExecutionState.CANCELLED:
        execution.reason = reason or "Query was cancelled"
        raise QueryCancelledError(execution.reason)
    return execution


async def wait_for_completion(
    engine: QueryEngine,
    execution: Execution,
    policy: PollPolicy,
    clock: Clock = time.monotonic,
    sleep: Sleep = asyncio.sleep,
) -> Execution:
    """Poll until the execution succeeds; raise for every other terminal state.

    Raises EngineFailureError, QueryCancelledError, UnknownStateError or
    QueryTimeoutError. The execution's state is updated before raising.
    Each status call is bounded by what is left of the budget, so a stalled
    call ends in QueryTimeoutError. Transport errors propagate unchanged.
    """
    log = get_logger("poller").bind(handle=execution.handle)
    deadline = execution.submitted_at + policy.timeout

    while True:
        try:
            async with asyncio.timeout(max(deadline - clock(), 0)):
                status = await engine.get_status(execution.handle)
        except TimeoutError:
            log.warning("status check stalled", timeout=policy.timeout)
            raise _timed_out(
                execution,
                f"Status check for query {execution.handle} did not return "
                f"within the {policy.timeout:g}s budget",
            ) from None

        execution.attempts += 1
        execution.last_polled_at = clock()
        execution.stats = status.stats

        state = ENGINE_STATES.get(status.state)
        if state is None:
            execution.state = ExecutionState.FAILED
            execution.reason = f"Unknown engine state: {status.state!r}"
            log.error("unknown execution state", engine_state=status.state)
            raise UnknownStateError(execution.reason)

        execution.state = state
        log.debug("execution polled", state=state.value, attempt=execution.attempts)

        if execution.is_terminal:
            log.info(
                "execution finished", state=state.value, attempts=execution.attempts
            )
            return _settle(execution, status.reason)

        remaining = deadline - execution.last_polled_at
        if remaining <= 0:
            log.warning("execution timed out", attempts=execution.attempts)
            raise _timed_out(
                execution,
                f"Query {execution.handle} did not finish within "
                f"{policy.timeout:g}s ({execution.attempts} status checks)",
            )
        if execution.attempts >= policy.max_attempts:
            log.warning("poll attempts exhausted", attempts=execution.attempts)
            raise _timed_out(
                execution,
                f"Query {execution.handle} still {state.value} after "
                f"{execution.attempts} status checks (max_attempts reached)",
            )

        await sleep(min(policy.interval, remaining))
