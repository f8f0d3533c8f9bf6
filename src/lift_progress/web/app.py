"""FastAPI application for the lift-progress JSON API."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from .. import __version__
from ..config import AppConfig
from ..db.engine import init_db
from .routers import progress


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or AppConfig.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler - runs on startup and shutdown."""
        # Startup: Initialize database
        await init_db(config.storage.db_path)
        yield

    app = FastAPI(
        title="lift-progress",
        description="Workout progress aggregation and analytics",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config in app state for use in routers
    app.state.config = config

    app.include_router(progress.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app
