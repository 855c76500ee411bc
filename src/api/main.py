"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import run_migrations
from src.api.dependencies import build_email_sender
from src.api.v1 import router as v1_router
from src.config.settings import get_settings
from src.domain.exceptions import InfrastructureError

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "auth",
        "description": "Registration, email verification and login",
    },
    {
        "name": "users",
        "description": "Account administration - requires a bearer token for a non-blocked account",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool on startup
    - Runs migrations on startup
    - Starts the background email sender
    - Drains the email sender and closes the pool on shutdown
    """
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logger.info("Starting application...")
    logger.info("Connecting to database...")

    # Create connection pool with explicit sizing
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        open=True,
    )

    # Run migrations
    logger.info("Running database migrations...")
    run_migrations(pool)

    # Store shared resources in app state for dependency injection
    app.state.pool = pool
    app.state.email_sender = build_email_sender(settings)

    logger.info("Application startup complete (email backend: %s)", settings.email_backend)

    yield

    # Shutdown
    logger.info("Shutting down application...")
    app.state.email_sender.shutdown(wait=True)
    pool.close()
    logger.info("Database connection pool closed")


async def infrastructure_error_handler(request: Request, exc: InfrastructureError) -> JSONResponse:
    """Report collaborator outages as a generic 500; details stay in the logs."""
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Server error"},
    )


app = FastAPI(
    title="account-gate",
    description="Account trust-state management API - registration, verification, "
    "login and administrative bulk operations behind a live authorization gate",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.add_exception_handler(InfrastructureError, infrastructure_error_handler)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    # Validate database connectivity
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}
