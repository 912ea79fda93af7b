"""FastAPI application factory for the calculator API."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from contract_calc import __version__
from contract_calc.api import routes
from contract_calc.config import AppSettings


def create_app(settings: AppSettings | None = None, lifespan: Any = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. Defaults to AppSettings() from env.
        lifespan: Optional async context manager for startup/shutdown.

    Returns:
        Configured FastAPI application with the calculator routes under /api.
    """
    app = FastAPI(
        title="Contract Calculator",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings if settings is not None else AppSettings()
    app.include_router(routes.router, prefix="/api")
    return app
