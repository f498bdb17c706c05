"""Authentication: passwords, JWT access tokens and refresh tokens.

Routes and the auth service live in ``zatch.core.auth.routes`` and
``zatch.core.auth.service``; they are not re-exported here because they
depend on the tenants module.
"""

from zatch.core.auth.backend import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    hash_token,
    verify_password,
)
from zatch.core.auth.dependencies import (
    CurrentUser,
    OptionalUser,
    get_current_user,
    get_optional_user,
)
from zatch.core.auth.middleware import HostContextMiddleware, RequestIdMiddleware
from zatch.core.auth.schemas import TokenData, TokenPair


__all__ = [
    # Dependencies
    "CurrentUser",
    # Middleware
    "HostContextMiddleware",
    "OptionalUser",
    "RequestIdMiddleware",
    # Schemas
    "TokenData",
    "TokenPair",
    # Token utilities
    "create_access_token",
    "create_refresh_token",
    "decode_token",
    "get_current_user",
    "get_optional_user",
    # Password utilities
    "hash_password",
    "hash_token",
    "verify_password",
]
