"""FastAPI application factory.

Lifespan
--------
The orchestrator is built once per application from the frozen
:class:`~quizsolver.config.Settings` and shared by every request via
``request.app.state.orchestrator``.  It keeps no per-task state, so
concurrent tasks run interleaved on the event loop without locking.

Routers
-------
    /task    accept a quiz task and process it in the background
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from quizsolver.config import Settings, settings as default_settings
from quizsolver.pipeline import TaskOrchestrator

from quizsolver.api.routers import task as task_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log startup and shutdown; warn when no shared secret is configured."""
    if not app.state.settings.secret:
        logger.warning("[API] SECRET is not set; every task will be rejected with 403")
    logger.info(f"[API] Server listening on port {app.state.settings.port}")
    yield
    logger.info("[API] Server shutting down")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    settings = settings or default_settings

    app = FastAPI(
        title="Quiz Solver API",
        description=(
            "Accepts quiz tasks, acknowledges them immediately and solves each one "
            "in the background: headless navigation, payload decoding, resource "
            "download, answer computation and submission."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.orchestrator = TaskOrchestrator(settings)

    @app.get("/", response_class=PlainTextResponse)
    def root() -> str:
        """Liveness check."""
        return "Quiz solver server is running."

    app.include_router(task_router.router, prefix="/task", tags=["task"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn quizsolver.api.app:app
app = create_app()
