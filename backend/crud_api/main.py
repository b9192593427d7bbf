"""crud-api: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CrudApiError -> structured JSON responses
    - The DatabaseSessionManager lives on app.state for the app's lifetime and is
      disposed on shutdown
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crud_api.api.error_handlers import register_error_handlers
from crud_api.api.middleware import register_request_context
from crud_api.api.routes import health, users
from crud_api.config import get_settings
from crud_api.infrastructure.database import DatabaseSessionManager
from crud_api.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    owns_manager = getattr(app.state, "db_manager", None) is None
    if owns_manager:
        app.state.db_manager = DatabaseSessionManager(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        if settings.database_auto_create:
            await app.state.db_manager.create_schema()
    logger.info("crud-api started")
    yield
    logger.info("crud-api shutting down")
    if owns_manager:
        await app.state.db_manager.close()
        app.state.db_manager = None


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="crud-api", version=VERSION, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_request_context(app)
    register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(users.router)
    return app


app = create_app()
