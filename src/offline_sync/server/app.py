"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from offline_sync import __version__
from offline_sync.remote.repository import RecordRepository, default_seed
from offline_sync.server.dependencies import get_repository as shared_get_repository
from offline_sync.server.models import HealthResponse
from offline_sync.server.routes import records_router

logger = logging.getLogger(__name__)


def create_app(
    repository: RecordRepository | None = None,
    *,
    title: str = "offline-sync",
    description: str = "Authoritative record store for offline-sync clients",
    cors_origins: list[str] | None = None,
    seed: bool | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        repository: Record repository to serve; a fresh one when None
        title: API title
        description: API description
        cors_origins: Allowed CORS origins (default: from environment config)
        seed: Load the sample employee into a fresh repository
            (default: from environment config)

    Returns:
        Configured FastAPI application
    """
    from offline_sync.utils.config import get_config

    config = get_config()

    if repository is None:
        use_seed = config.seed if seed is None else seed
        repository = RecordRepository(seed=default_seed() if use_seed else None)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Serving %d records", len(app.state.repository))
        yield

    app = FastAPI(
        title=title,
        description=description,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=config.debug,
    )
    app.state.repository = repository

    if cors_origins is None:
        cors_origins = list(config.cors_origins)

    is_wildcard = cors_origins == ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=not is_wildcard,  # Don't allow creds with wildcard
        allow_methods=["*"],
        allow_headers=["*"],
    )

    async def get_repository() -> RecordRepository:
        repo: RecordRepository = app.state.repository
        return repo

    app.dependency_overrides[shared_get_repository] = get_repository

    app.include_router(records_router)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy", version=__version__, records=len(app.state.repository)
        )

    @app.get("/", tags=["health"])
    async def root() -> dict[str, str]:
        """Root endpoint with API info."""
        return {
            "name": title,
            "description": description,
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
            "records": "/api/records",
        }

    return app
