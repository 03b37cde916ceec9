"""
FastAPI app entry point: the command layer over the lunch store.
Keep as `uvicorn lunch.api:app`.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import __version__
from .errors import StoreIOError
from .logs import configure_logging
from .services.config_svc import get_config
from .services.store_svc import initialize

logger = logging.getLogger(__name__)


def create_app(db_path: str | None = None, settings: dict | None = None) -> FastAPI:
    """Build the app; the store is opened on startup and closed on shutdown."""
    settings = dict(settings or get_config())
    if db_path:
        settings["db_path"] = db_path

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings["log_level"])
        try:
            store = initialize(settings["db_path"], lock_timeout=settings["lock_timeout"])
        except StoreIOError as e:
            logger.critical("cannot start: %s", e)
            raise
        app.state.store = store
        app.state.settings = settings
        try:
            yield
        finally:
            store.close()

    app = FastAPI(title="lunch-api", version=__version__, lifespan=lifespan)

    # Include routers (split by business domain)
    from .routes import base as base_routes
    from .routes import restaurants as restaurants_routes
    from .routes import lunch as lunch_routes

    app.include_router(base_routes.router)
    app.include_router(restaurants_routes.router)
    app.include_router(lunch_routes.router)
    return app


app = create_app()
