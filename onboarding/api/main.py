"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures routers and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from onboarding.adapters.kv import InMemoryKeyValueStore, PostgresKeyValueStore
from onboarding.adapters.repository import (
    InMemoryAffiliateRepository,
    PostgresAffiliateRepository,
    run_migrations,
)
from onboarding.api.v1 import router as v1_router
from onboarding.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Affiliate Registration API v1 - Stage, verify and review affiliate registrations",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool on startup (postgres backend)
    - Runs migrations on startup (postgres backend)
    - Wires session store and affiliate repository into app state
    - Closes connection pool on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")
    pool: ConnectionPool | None = None

    if settings.storage_backend == "postgres":
        logger.info("Connecting to database...")

        # Create connection pool with explicit sizing
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )

        logger.info("Running database migrations...")
        run_migrations(pool)

        app.state.kv_store = PostgresKeyValueStore(pool)
        app.state.affiliates = PostgresAffiliateRepository(pool, bcrypt_cost=settings.bcrypt_cost)
    else:
        logger.warning("Using in-memory storage; data is lost on restart")
        app.state.kv_store = InMemoryKeyValueStore()
        app.state.affiliates = InMemoryAffiliateRepository(bcrypt_cost=settings.bcrypt_cost)

    app.state.pool = pool
    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="affiliate-onboarding",
    description="Affiliate Registration API - Staged email verification and reviewer approval",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is not None:
        with pool.connection() as conn:
            conn.execute("SELECT 1")

    return {"status": "healthy"}
