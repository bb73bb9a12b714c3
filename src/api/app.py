"""
FastAPI application factory.

``create_app()`` assembles the application with CORS, auth, error
handlers, routers, and the health endpoint. The module-level ``app``
instance allows ``uvicorn src.api.app:app --reload``.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.middleware.auth import ApiKeyAuthMiddleware
from src.api.middleware.error_handler import register_error_handlers
from src.api.routes import summarize
from src.core.config import get_settings
from src.core.models import HealthResponse
from src.services.storage import close_db, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Create the summary table on startup when the SQL store is selected."""
    settings = get_settings()
    if settings.summary_store == "sqlite":
        await init_db()
        logger.info("Summary database initialized")
    yield
    await close_db()


def create_app() -> FastAPI:
    """Build and return a fully configured FastAPI application."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title="Meeting Recap",
        description="Structured plain-text summaries of recorded calls.",
        version="0.1.0",
        lifespan=lifespan,
    )

    # -- Auth (must sit inside CORS) --
    app.add_middleware(ApiKeyAuthMiddleware)

    # -- CORS --
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],  # Meeting UI
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Error handlers --
    register_error_handlers(app)

    # -- Health check (root-level, not under /api/v1) --
    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(timestamp=datetime.now(UTC))

    # -- REST routes --
    app.include_router(summarize.router, prefix="/api/v1")

    return app


app = create_app()
