"""Query and catalog endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from athena_tool.__about__ import __version__
from athena_tool.core.exceptions import AthenaToolError, ErrorKind
from athena_tool.core.models import QueryOutcome

router = APIRouter(prefix="/api")

_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CANCELLED: 409,
    ErrorKind.ENGINE_FAILURE: 422,
    ErrorKind.TRANSPORT_ERROR: 502,
    ErrorKind.UNKNOWN_STATE: 502,
    ErrorKind.TIMED_OUT: 504,
}


def outcome_response(outcome: QueryOutcome) -> JSONResponse:
    status_code = 200
    if outcome.error is not None:
        status_code = _STATUS_BY_KIND.get(outcome.error.kind, 500)
    return JSONResponse(outcome.to_response(), status_code=status_code)


@router.get("/status")
def status(request: Request) -> dict:
    config = request.app.state.config
    return {
        "service": "athena-tool",
        "version": __version__,
        "region": config.region,
        "workgroup": config.workgroup,
        "database": config.database,
    }


@router.get("/named-queries")
def named_queries(request: Request) -> dict:
    orchestrator = request.app.state.orchestrator
    return {
        "success": True,
        "data": [entry.summary() for entry in orchestrator.named_queries()],
    }


@router.post("/query")
async def run_query(request: Request) -> JSONResponse:
    try:
        payload = await request.json()
    except ValueError:
        # Not JSON at all; the dispatcher reports it as an invalid request.
        payload = None
    outcome = await request.app.state.orchestrator.execute_payload(payload)
    return outcome_response(outcome)


@router.get("/test-connection")
async def test_connection(request: Request) -> JSONResponse:
    engine = request.app.state.orchestrator.engine
    check = getattr(engine, "check_connection", None)
    if check is None:
        return JSONResponse({"success": True, "data": {"engine": type(engine).__name__}})
    try:
        info = await check()
    except AthenaToolError as e:
        outcome = QueryOutcome.failure(e.kind, e.message)
        return outcome_response(outcome)
    return JSONResponse({"success": True, "data": info})
