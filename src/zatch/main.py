"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from zatch.api.router import api_router
from zatch.config import settings
from zatch.core.auth import HostContextMiddleware, RequestIdMiddleware
from zatch.core.database import async_engine
from zatch.core.errors import register_exception_handlers
from zatch.core.jobs import close_arq_pool, init_arq_pool
from zatch.core.logging import RequestLoggingMiddleware, configure_logging
from zatch.core.observability import setup_tracing, shutdown_tracing


configure_logging()

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info(
        "application_startup",
        app_name=settings.app_name,
        environment=settings.environment,
    )

    # The API keeps serving without Redis; only enqueueing is affected.
    try:
        await init_arq_pool()
        logger.info("arq_pool_initialized")
    except Exception as e:
        logger.warning("arq_pool_init_failed", error=str(e))

    yield

    logger.info("application_shutdown")

    shutdown_tracing()
    logger.info("tracing_shutdown")

    await close_arq_pool()
    logger.info("arq_pool_closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant real-estate platform: agencies, domains, listings and portal feeds",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
    )

    cors_origins = settings.cors_origins
    if settings.is_development and not cors_origins:
        cors_origins = ["http://localhost:3000", "http://localhost:5173"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )

    # Starlette runs the last-added middleware first
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(HostContextMiddleware)
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)

    app.include_router(api_router)

    setup_tracing(app, async_engine)

    return app


app = create_app()
