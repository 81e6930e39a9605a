"""
FastAPI application factory.

create_app() wires the v1 router, the health check and the error
pipeline for one Settings instance. The module-level ``app`` is the
instance served in production (``uvicorn src.api.main:app``).
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import run_migrations
from src.api.dependencies import create_error_responder
from src.api.models import HealthResponse
from src.api.v1 import router as v1_router
from src.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

tags_metadata = [
    {
        "name": "v1",
        "description": "Account Registration API v1 - Create user accounts",
    },
]


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)


def open_pool(settings: Settings) -> ConnectionPool:
    """Open the connection pool and bring the schema up to date."""
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )
    run_migrations(pool)
    return pool


def create_app(settings: Settings) -> FastAPI:
    """
    Build the application.

    The pool is opened on startup and closed on shutdown; every unhandled
    exception is rendered by the error responder built from ``settings``.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        configure_logging(settings)
        logger.info("Connecting to database...")
        app.state.pool = open_pool(settings)
        logger.info("Application startup complete")

        yield

        app.state.pool.close()
        logger.info("Database connection pool closed")

    app = FastAPI(
        title="gatehouse",
        description="Account Registration API - Captcha/CSRF gated account creation with classified error rendering",
        version="0.1.0",
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )
    app.include_router(v1_router, prefix="/v1")
    app.add_exception_handler(Exception, create_error_responder(settings))

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request) -> HealthResponse:
        """
        Health check with database validation.

        Database errors are rendered by the error pipeline (503).
        """
        with request.app.state.pool.connection() as conn:
            conn.execute("SELECT 1")
        return HealthResponse(status="healthy")

    return app


app = create_app(get_settings())
