"""User Directory API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map DirectoryError → envelope JSON responses
    - CORS configured from settings: one client origin
    - Document store connected on startup via lifespan; unreachable store aborts startup
    - SIGINT/SIGTERM: uvicorn stops accepting, drains in-flight requests, then lifespan closes the store
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from directory_api import __version__
from directory_api.api.error_handlers import register_error_handlers
from directory_api.api.middleware import RequestSizeLimitMiddleware
from directory_api.api.routes import health, service, users
from directory_api.config import get_settings
from directory_api.infrastructure.database import close_store, init_store
from directory_api.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    await init_store(
        settings.mongodb_uri,
        settings.database_name,
        timeout_ms=settings.mongodb_timeout_ms,
    )
    logger.info(
        "User Directory API started",
        extra={
            "environment": settings.environment,
            "database": settings.database_name,
        },
    )
    yield
    logger.info("User Directory API shutting down")
    await close_store()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="User Directory API", version=__version__, lifespan=lifespan,
    )

    app.add_middleware(
        RequestSizeLimitMiddleware, max_bytes=settings.max_body_bytes,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.include_router(service.router)
    app.include_router(health.router)
    app.include_router(users.router)

    register_error_handlers(app)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn.

    A failed lifespan startup (store unreachable) makes uvicorn exit non-zero.
    """
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info(f"Serving on http://{settings.host}:{settings.port}")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        timeout_graceful_shutdown=settings.shutdown_timeout_seconds,
        log_config=None,
    )


if __name__ == "__main__":
    run()
