"""
FastAPI application for the Task Manager.

Routes:
- POST   /register    : create an account
- POST   /login       : obtain a bearer token
- GET    /profile     : current user's profile
- POST   /tasks       : create a task
- GET    /tasks       : list the caller's tasks
- PUT    /tasks/{id}  : update a task
- DELETE /tasks/{id}  : delete a task
- GET    /health      : health check
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import Settings, get_settings, validate_startup_security
from core.api import API_TAGS, core_router
from database.async_engine import close_database, init_database
from middleware.correlation import (
    CORRELATION_ID_HEADER,
    REQUEST_ID_HEADER,
    CorrelationIdMiddleware,
    configure_correlation_logging,
)
from security.api_errors import register_exception_handlers
from web.routers.health import router as health_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with middleware, error handlers and routes."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_correlation_logging(settings.log_level)
        validate_startup_security(settings, exit_on_failure=not settings.debug)
        await init_database()
        logger.info(
            f"{settings.name} {settings.version} started",
            extra={"environment": settings.environment},
        )
        yield
        await close_database()
        logger.info("Shutdown complete")

    app = FastAPI(
        title=settings.name,
        version=settings.version,
        debug=settings.debug,
        openapi_tags=API_TAGS,
        lifespan=lifespan,
    )

    # =========================================================================
    # MIDDLEWARE (last added = first executed)
    # =========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Authorization", "Content-Type", CORRELATION_ID_HEADER],
        expose_headers=[CORRELATION_ID_HEADER, REQUEST_ID_HEADER],
    )
    app.add_middleware(CorrelationIdMiddleware)

    register_exception_handlers(app)

    app.include_router(core_router)
    app.include_router(health_router)

    return app


app = create_app()
