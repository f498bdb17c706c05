"""Cleanup tasks for expired data."""

from datetime import UTC, datetime
from typing import Any

import structlog
from sqlalchemy import delete, or_

from zatch.modules.users.models import RefreshToken


log = structlog.get_logger()


async def cleanup_expired_tokens(ctx: dict[str, Any]) -> dict[str, int]:
    """Delete refresh tokens that expired or were revoked.

    Args:
        ctx: Worker context containing database session factory
    """
    session_factory = ctx["db_session_factory"]
    now = datetime.now(UTC)

    async with session_factory() as session:
        result = await session.execute(
            delete(RefreshToken).where(
                or_(RefreshToken.expires_at < now, RefreshToken.revoked == True)  # noqa: E712
            )
        )
        deleted = result.rowcount
        await session.commit()

    log.info("cleanup_expired_tokens_complete", refresh_tokens_deleted=deleted)
    return {"refresh_tokens_deleted": deleted}
