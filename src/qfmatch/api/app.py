"""FastAPI application with lifespan and router mounting."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from qfmatch.api.errors import register_error_handlers
from qfmatch.api.routes import data, health, matches
from qfmatch.core.config import AppSettings
from qfmatch.core.protocols import IDataProvider
from qfmatch.persistence import create_data_provider


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging for the lifetime of the server."""
    logging.basicConfig(level=app.state.settings.log_level.upper())
    yield


def create_app(
    settings: AppSettings | None = None,
    data_provider: IDataProvider | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``data_provider`` defaults to the backend selected by ``settings``; it is
    fixed for the app's lifetime and handed to each request as a dependency.
    """
    if settings is None:
        settings = AppSettings()
    if data_provider is None:
        data_provider = create_data_provider(settings)

    app = FastAPI(
        title="QF Matching Calculator",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.data_provider = data_provider

    register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(matches.router)
    app.include_router(data.router)

    if settings.storage_backend == "filesystem":
        app.mount(
            "/data",
            StaticFiles(directory=settings.storage_dir, check_dir=False),
            name="data",
        )
    return app
