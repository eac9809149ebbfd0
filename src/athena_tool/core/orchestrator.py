"""Query orchestration facade.

Sequences dispatcher -> submission -> poller -> normalizer for one
request and folds every failure into a single QueryOutcome.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any

import sentry_sdk

from athena_tool.core.catalog import load_catalog
from athena_tool.core.client import AthenaClient
from athena_tool.core.dispatcher import (
    DEFAULT_MAX_QUERY_LENGTH,
    parse_request,
    resolve_sql,
)
from athena_tool.core.exceptions import AthenaToolError, ErrorKind, QueryTimeoutError
from athena_tool.core.logging import get_logger
from athena_tool.core.models import QueryOutcome
from athena_tool.core.normalizer import fetch_result_set
from athena_tool.core.poller import PollPolicy, start_execution, wait_for_completion

if TYPE_CHECKING:
    from athena_tool.core.catalog import NamedQueryCatalog, NamedQueryEntry
    from athena_tool.core.config import ResolvedConfig
    from athena_tool.core.engine import QueryEngine
    from athena_tool.core.models import Execution, QueryRequest, ResultSet
    from athena_tool.core.poller import Clock, Sleep


class QueryOrchestrator:
    """Runs query requests against a QueryEngine.

    Safe to share across concurrent requests: per-request state lives in
    a local Execution, and the engine and catalog are only read.
    """

    def __init__(
        self,
        engine: QueryEngine,
        catalog: NamedQueryCatalog,
        policy: PollPolicy | None = None,
        *,
        max_query_length: int = DEFAULT_MAX_QUERY_LENGTH,
        cancel_on_timeout: bool = True,
        cancel_timeout: float = 5.0,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.engine = engine
        self.catalog = catalog
        self.policy = policy or PollPolicy()
        self.max_query_length = max_query_length
        self.cancel_on_timeout = cancel_on_timeout
        self.cancel_timeout = cancel_timeout
        self._clock = clock
        self._sleep = sleep

    def close(self) -> None:
        self.engine.close()

    def named_queries(self) -> list[NamedQueryEntry]:
        return list(self.catalog)

    async def execute_payload(self, payload: Any) -> QueryOutcome:
        """Parse an inbound `{sql}` / `{queryType, namedQueryId}` payload and run it."""
        try:
            request = parse_request(payload)
        except AthenaToolError as e:
            return QueryOutcome.failure(e.kind, e.message)
        return await self.execute(request)

    async def execute(self, request: QueryRequest) -> QueryOutcome:
        """Run one request to exactly one Success or Failure outcome."""
        log = get_logger("orchestrator")
        try:
            sql = resolve_sql(request, self.catalog, self.max_query_length)
        except AthenaToolError as e:
            log.info("request rejected", kind=e.kind.value, error=e.message)
            return QueryOutcome.failure(e.kind, e.message)

        sql_preview = " ".join(sql.split())[:100]
        with sentry_sdk.start_span(op="athena.query", description=sql_preview) as span:
            try:
                result = await self._run(sql)
            except AthenaToolError as e:
                span.set_status("internal_error")
                return QueryOutcome.failure(e.kind, e.message)
            except asyncio.CancelledError:
                span.set_status("cancelled")
                raise
            except Exception as e:
                span.set_status("internal_error")
                log.exception("unexpected orchestration error")
                sentry_sdk.capture_exception(e)
                return QueryOutcome.failure(
                    ErrorKind.TRANSPORT_ERROR, f"Unexpected error: {e}"
                )

            span.set_data("row_count", result.row_count)
            return QueryOutcome.ok(result)

    async def _run(self, sql: str) -> ResultSet:
        log = get_logger("orchestrator")
        handle = await self.engine.submit(sql)
        execution = start_execution(handle, self._clock)
        log.info("query submitted", handle=handle, sql=" ".join(sql.split())[:100])

        try:
            await wait_for_completion(
                self.engine, execution, self.policy, self._clock, self._sleep
            )
        except QueryTimeoutError:
            if self.cancel_on_timeout:
                await self._cancel_remote(execution)
            raise
        except asyncio.CancelledError:
            log.info("request cancelled by caller", handle=handle)
            await asyncio.shield(self._cancel_remote(execution))
            raise

        result = await fetch_result_set(self.engine, handle, execution.stats)
        log.info(
            "query complete",
            handle=handle,
            row_count=result.row_count,
            execution_time_ms=result.stats.execution_time_ms,
            bytes_scanned=result.stats.bytes_scanned,
        )
        return result

    async def _cancel_remote(self, execution: Execution) -> None:
        """Best-effort StopQueryExecution, bounded by cancel_timeout."""
        log = get_logger("orchestrator").bind(handle=execution.handle)
        try:
            await asyncio.wait_for(
                self.engine.cancel(execution.handle), timeout=self.cancel_timeout
            )
        except TimeoutError:
            log.warning("remote cancel not acknowledged", timeout=self.cancel_timeout)
        except AthenaToolError as e:
            log.warning("remote cancel failed", error=e.message)
        else:
            log.info("remote execution cancel requested")


def build_orchestrator(
    config: ResolvedConfig, engine: QueryEngine | None = None
) -> QueryOrchestrator:
    """Construct an orchestrator (and AthenaClient unless given) from config."""
    return QueryOrchestrator(
        engine if engine is not None else AthenaClient(config),
        load_catalog(config.named_queries_file),
        PollPolicy(
            interval=config.poll_interval,
            timeout=config.timeout,
            max_attempts=config.max_attempts,
        ),
        max_query_length=config.max_query_length,
        cancel_on_timeout=config.cancel_on_timeout,
        cancel_timeout=config.cancel_timeout,
    )
