"""FastAPI application factory."""

import asyncio
import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pharmagenie.config import get_settings
from pharmagenie.infrastructure.database import Base, engine
from pharmagenie.infrastructure.dependencies import get_grammatical_tagger
from pharmagenie.infrastructure.genai import create_provider
from pharmagenie.infrastructure.logging.log_config import setup_logging
from pharmagenie.presentation.api.router import router as api_router
from pharmagenie.presentation.middleware import register_middleware

logger = logging.getLogger(__name__)


async def _ensure_database_exists() -> None:
    """Create the PostgreSQL database if it does not yet exist.

    Connects to the default ``postgres`` maintenance database, checks for the
    target database name, and issues ``CREATE DATABASE`` when missing.
    """
    from urllib.parse import urlparse

    import asyncpg

    settings = get_settings()
    if not settings.database_url.startswith("postgresql"):
        return
    parsed = urlparse(settings.database_url)
    db_name = parsed.path.lstrip("/")
    if not db_name:
        return

    maintenance_url = settings.database_url.rsplit("/", 1)[0] + "/postgres"

    try:
        conn = await asyncpg.connect(maintenance_url)
        try:
            exists = await conn.fetchval(
                "SELECT 1 FROM pg_database WHERE datname = $1", db_name
            )
            if not exists:
                # CREATE DATABASE cannot run inside a transaction block
                await conn.execute(f'CREATE DATABASE "{db_name}"')
                logger.info("Created database '%s'", db_name)
            else:
                logger.debug("Database '%s' already exists", db_name)
        finally:
            await conn.close()
    except Exception as exc:
        logger.warning("Could not auto-create database '%s': %s", db_name, exc)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: logging, tables, GenAI provider, tagger model."""
    settings = get_settings()
    setup_logging()

    # 0. Ensure the PostgreSQL database exists (auto-create if missing)
    await _ensure_database_exists()

    # 1. Create all database tables; the API still serves the analyzer without them
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception:
        logger.exception("Could not create database tables; record reads will fail")

    # 2. Select the GenAI provider once for the lifetime of the process
    app.state.genai_provider = create_provider(settings)

    # 3. Load the tagger model off the event loop before the first query
    await asyncio.to_thread(get_grammatical_tagger().warm_up)

    yield

    # Shutdown
    await engine.dispose()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After", "Content-Disposition"],
    )

    # Request id + access logging
    register_middleware(app)

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pharmagenie.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
