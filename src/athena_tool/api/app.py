"""FastAPI application factory for the dashboard API."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from athena_tool.api.router import router
from athena_tool.core.orchestrator import build_orchestrator

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from athena_tool.core.config import ResolvedConfig
    from athena_tool.core.orchestrator import QueryOrchestrator


def create_app(
    config: ResolvedConfig,
    orchestrator: QueryOrchestrator | None = None,
) -> FastAPI:
    """Build the API app; the orchestrator is created once per process."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if getattr(app.state, "orchestrator", None) is None:
            app.state.orchestrator = build_orchestrator(config)
        yield
        app.state.orchestrator.close()

    app = FastAPI(title="Athena Tool", lifespan=lifespan)
    app.state.config = config
    app.state.orchestrator = orchestrator

    # Allow the local dashboard dev server to call this API from the browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(router, tags=["query"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "healthy"}

    return app
