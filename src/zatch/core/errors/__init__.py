"""Application errors and their problem-response handlers."""

from zatch.core.errors.exceptions import (
    AppException,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServiceUnavailableError,
    TenantGateError,
    UnauthorizedError,
)
from zatch.core.errors.handlers import register_exception_handlers


__all__ = [
    "AppException",
    "BadRequestError",
    "ConflictError",
    "ForbiddenError",
    "NotFoundError",
    "RateLimitError",
    "ServiceUnavailableError",
    "TenantGateError",
    "UnauthorizedError",
    "register_exception_handlers",
]
