"""ARQ worker configuration.

Run the worker with:
    arq zatch.core.jobs.worker.WorkerSettings
"""

from typing import Any, ClassVar

import structlog
from arq import cron
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from zatch.config import settings
from zatch.core.jobs.registry import get_redis_settings
from zatch.core.jobs.tasks.cleanup import cleanup_expired_tokens
from zatch.core.jobs.tasks.domains import verify_domain, verify_pending_domains
from zatch.core.logging import configure_logging


async def startup(ctx: dict[str, Any]) -> None:
    """Create the database engine shared by all jobs."""
    configure_logging()
    log = structlog.get_logger()
    log.info("worker_startup", environment=settings.environment)

    engine = create_async_engine(
        settings.async_database_url,
        pool_size=5,
        max_overflow=10,
        echo=settings.database_echo,
    )
    ctx["db_engine"] = engine
    ctx["db_session_factory"] = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def shutdown(ctx: dict[str, Any]) -> None:
    log = structlog.get_logger()
    engine = ctx.get("db_engine")
    if engine:
        await engine.dispose()
        log.info("database_engine_disposed")
    log.info("worker_shutdown_complete")


class WorkerSettings:
    """ARQ worker settings."""

    functions: ClassVar[list[Any]] = [
        cleanup_expired_tokens,
        verify_domain,
        verify_pending_domains,
    ]

    cron_jobs: ClassVar[list[Any]] = [
        # Every 15 minutes
        cron(verify_pending_domains, minute={0, 15, 30, 45}),
        # Daily at 3 AM
        cron(cleanup_expired_tokens, hour=3, minute=0),
    ]

    on_startup = startup
    on_shutdown = shutdown

    redis_settings = get_redis_settings()

    max_jobs = 10
    job_timeout = 300
    keep_result = 3600
    retry_jobs = True
    max_tries = 3
