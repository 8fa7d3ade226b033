"""Application factory that serves both the API and the HTML pages."""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from .api import create_app as create_api_app
from .config import ServiceConfig, load_config
from .database import Database
from .users import UserRepository
from .web import create_app as create_web_app

logger = logging.getLogger("userdesk.application")


def create_application(
    *,
    config: Optional[ServiceConfig] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    """Create the combined ASGI application."""

    if database is None:
        if config is None:
            config = load_config()
        database = Database(config.database_path)
    database.initialize()
    logger.info("Using user database at %s", database.path)

    repository = UserRepository(database)

    app = FastAPI(
        title="Userdesk",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.database = database
    app.state.repository = repository

    app.mount("/api", create_api_app(repository=repository))
    app.mount("/", create_web_app(repository=repository))

    return app


__all__ = ["create_application"]
