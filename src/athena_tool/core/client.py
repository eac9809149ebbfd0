"""AWS Athena client for Athena Tool.

Wraps a synchronous boto3 Athena client behind the async QueryEngine
protocol. Each AWS call runs in a worker thread so concurrent poll loops
never block the event loop; botocore exceptions are mapped to the
AthenaToolError hierarchy.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any

import boto3
import sentry_sdk
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError, ProfileNotFound

from athena_tool.core.exceptions import (
    ConfigError,
    EngineFailureError,
    NetworkError,
)
from athena_tool.core.logging import get_logger
from athena_tool.core.models import (
    ColumnMeta,
    EngineStatus,
    ExecutionStats,
    ResultPage,
)

if TYPE_CHECKING:
    from athena_tool.core.config import ResolvedConfig

# Retries inside botocore cover throttling; the poller owns the overall deadline.
_BOTO_CONFIG = Config(
    retries={"max_attempts": 3, "mode": "standard"},
    connect_timeout=10,
    read_timeout=30,
)


def _parse_stats(execution: dict[str, Any]) -> ExecutionStats | None:
    stats = execution.get("Statistics")
    if not stats:
        return None
    return ExecutionStats(
        execution_time_ms=int(stats.get("EngineExecutionTimeInMillis", 0)),
        bytes_scanned=int(stats.get("DataScannedInBytes", 0)),
    )


def _parse_result_page(response: dict[str, Any]) -> ResultPage:
    result_set = response.get("ResultSet", {})
    column_info = result_set.get("ResultSetMetadata", {}).get("ColumnInfo", [])
    columns = [
        ColumnMeta(name=col["Name"], type=col.get("Type", "varchar"))
        for col in column_info
    ]
    rows = [
        [datum.get("VarCharValue") for datum in row.get("Data", [])]
        for row in result_set.get("Rows", [])
    ]
    return ResultPage(
        columns=columns,
        rows=rows,
        next_token=response.get("NextToken"),
    )


class AthenaClient:
    """Athena implementation of the QueryEngine protocol."""

    def __init__(self, config: ResolvedConfig, boto_client: Any | None = None) -> None:
        self.config = config
        self._client: Any | None = boto_client

    def __enter__(self) -> AthenaClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _connect(self) -> Any:
        if self._client is not None:
            return self._client

        try:
            session = boto3.session.Session(
                profile_name=self.config.aws_profile,
                region_name=self.config.region,
            )
            self._client = session.client("athena", config=_BOTO_CONFIG)
        except ProfileNotFound as e:
            msg = f"AWS profile not found: '{self.config.aws_profile}'"
            raise ConfigError(msg) from e
        except BotoCoreError as e:
            msg = f"Could not create Athena client in {self.config.region}: {e}"
            raise NetworkError(msg) from e

        return self._client

    async def _call(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        log = get_logger("client")
        client = self._connect()
        method = getattr(client, operation)

        with sentry_sdk.start_span(op="athena.api", description=operation) as span:
            start_time = time.monotonic()
            try:
                response: dict[str, Any] = await asyncio.to_thread(method, **kwargs)
            except ClientError as e:
                span.set_status("internal_error")
                code = e.response.get("Error", {}).get("Code", "Unknown")
                message = e.response.get("Error", {}).get("Message", str(e))
                log.debug("athena call failed", operation=operation, code=code)
                if code == "InvalidRequestException":
                    if operation == "start_query_execution":
                        raise EngineFailureError(message) from e
                    if operation in ("get_query_execution", "get_query_results"):
                        raise NetworkError(
                            f"Athena lost track of the execution: {message}"
                        ) from e
                raise NetworkError(f"Athena {operation} failed ({code}): {message}") from e
            except BotoCoreError as e:
                span.set_status("unavailable")
                log.debug("athena call failed", operation=operation, error=str(e))
                raise NetworkError(f"Athena {operation} failed: {e}") from e

            duration_ms = (time.monotonic() - start_time) * 1000
            span.set_data("duration_ms", duration_ms)
            log.debug(
                "athena call complete",
                operation=operation,
                duration_ms=f"{duration_ms:.1f}",
            )
            return response

    async def submit(self, sql: str) -> str:
        """Start a query execution and return its QueryExecutionId."""
        kwargs: dict[str, Any] = {
            "QueryString": sql,
            "WorkGroup": self.config.workgroup,
            "QueryExecutionContext": {
                "Database": self.config.database,
                "Catalog": self.config.catalog,
            },
        }
        if self.config.output_location:
            kwargs["ResultConfiguration"] = {
                "OutputLocation": self.config.output_location
            }

        response = await self._call("start_query_execution", **kwargs)
        return str(response["QueryExecutionId"])

    async def get_status(self, handle: str) -> EngineStatus:
        response = await self._call("get_query_execution", QueryExecutionId=handle)
        execution = response.get("QueryExecution", {})
        status = execution.get("Status", {})
        return EngineStatus(
            state=status.get("State", ""),
            reason=status.get("StateChangeReason"),
            stats=_parse_stats(execution),
        )

    async def get_results(
        self, handle: str, page_token: str | None = None
    ) -> ResultPage:
        """Fetch one page; statistics are attached to the first page only."""
        kwargs: dict[str, Any] = {
            "QueryExecutionId": handle,
            "MaxResults": self.config.page_size,
        }
        if page_token:
            kwargs["NextToken"] = page_token

        response = await self._call("get_query_results", **kwargs)
        page = _parse_result_page(response)

        if page_token is None:
            status = await self.get_status(handle)
            page.stats = status.stats
        return page

    async def cancel(self, handle: str) -> None:
        await self._call("stop_query_execution", QueryExecutionId=handle)

    async def check_connection(self) -> dict[str, Any]:
        """Verify the workgroup is reachable; returns a short description."""
        response = await self._call("get_work_group", WorkGroup=self.config.workgroup)
        workgroup = response.get("WorkGroup", {})
        result_config = workgroup.get("Configuration", {}).get(
            "ResultConfiguration", {}
        )
        return {
            "workgroup": workgroup.get("Name", self.config.workgroup),
            "state": workgroup.get("State", "UNKNOWN"),
            "output_location": result_config.get("OutputLocation"),
            "region": self.config.region,
        }

    def close(self) -> None:
        """Close the underlying boto3 client."""
        if self._client is not None:
            close = getattr(self._client, "close", None)
            if close is not None:
                close()
            self._client = None
