"""Database layer - session management, base models, and mixins."""

from zatch.core.database.base import Base, TenantMixin, TimestampMixin, UUIDMixin
from zatch.core.database.session import (
    async_engine,
    async_session_factory,
    get_db,
)
from zatch.core.database.tenant import TenantSession


__all__ = [
    "Base",
    "TenantMixin",
    "TenantSession",
    "TimestampMixin",
    "UUIDMixin",
    "async_engine",
    "async_session_factory",
    "get_db",
]
