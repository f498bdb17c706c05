"""Core services and cross-cutting concerns."""

from zatch.core.database import Base, get_db
from zatch.core.errors import (
    AppException,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    TenantGateError,
    UnauthorizedError,
    register_exception_handlers,
)


__all__ = [
    # Errors
    "AppException",
    # Database
    "Base",
    "ConflictError",
    "ForbiddenError",
    "NotFoundError",
    "TenantGateError",
    "UnauthorizedError",
    "get_db",
    "register_exception_handlers",
]
