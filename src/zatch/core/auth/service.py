"""Authentication service for login, registration, and token management."""

from datetime import UTC, datetime
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from zatch.api.dependencies import DBSession
from zatch.config import settings
from zatch.core.auth.backend import (
    create_access_token,
    create_refresh_token,
    get_token_expiration,
    hash_password,
    hash_token,
    verify_password,
)
from zatch.core.auth.schemas import TokenPair
from zatch.core.errors import ConflictError, UnauthorizedError
from zatch.modules.tenants.models import Tenant
from zatch.modules.tenants.services import TenantService
from zatch.modules.users.models import RefreshToken, User
from zatch.modules.users.repos import RefreshTokenRepository, UserRepository


logger = structlog.get_logger()


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as some drivers return them) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class AuthService:
    """Service for authentication operations.

    Handles user registration, login, token refresh, and logout.
    """

    def __init__(self, db: DBSession) -> None:
        self.db = db
        self.user_repo = UserRepository(db)
        self.token_repo = RefreshTokenRepository(db)

    async def register(
        self,
        email: str,
        password: str,
        full_name: str,
        tenant_name: str | None = None,
    ) -> tuple[User, Tenant | None, TokenPair]:
        """Register a new user, optionally together with a new agency.

        Args:
            email: User's email address
            password: Plain text password
            full_name: User's full name
            tenant_name: When given, an agency owned by the new user

        Returns:
            Tuple of (user, tenant or None, token_pair)

        Raises:
            ConflictError: If email already exists
        """
        existing = await self.user_repo.get_by_email(email)
        if existing:
            raise ConflictError(
                "Registration failed. If this email is already registered, please use the login page.",
                error_code="registration_failed",
            )

        user = await self.user_repo.create(
            User(
                email=email.strip().lower(),
                password_hash=hash_password(password),
                full_name=full_name,
            )
        )

        tenant = None
        if tenant_name:
            tenant = await TenantService(self.db).create_tenant(tenant_name, owner_id=user.id)

        logger.info("user_registered", user_id=str(user.id))
        token_pair = await self._create_tokens(user)
        return user, tenant, token_pair

    async def login(
        self,
        email: str,
        password: str,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> tuple[User, TokenPair]:
        """Authenticate a user with email and password.

        Logging in says nothing about tenant access; that is checked by the
        access gate against the hostname of each request.

        Raises:
            UnauthorizedError: If credentials are invalid
        """
        user = await self.user_repo.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.info("login_failed", reason="invalid_credentials")
            raise UnauthorizedError(
                "Invalid email or password",
                error_code="invalid_credentials",
            )

        if not user.is_active:
            raise UnauthorizedError(
                "Account is deactivated",
                error_code="account_inactive",
            )

        token_pair = await self._create_tokens(user, user_agent, ip_address)
        logger.info("user_logged_in", user_id=str(user.id))
        return user, token_pair

    async def refresh_tokens(
        self,
        refresh_token: str,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> TokenPair:
        """Refresh the access token using a refresh token.

        The old refresh token is revoked and a new one is issued.

        Raises:
            UnauthorizedError: If refresh token is invalid, expired or revoked
        """
        stored_token = await self.token_repo.get_by_hash(hash_token(refresh_token))

        if not stored_token:
            raise UnauthorizedError(
                "Invalid refresh token",
                error_code="invalid_refresh_token",
            )

        if as_utc(stored_token.expires_at) < datetime.now(UTC):
            await self.token_repo.revoke(stored_token)
            raise UnauthorizedError(
                "Refresh token expired",
                error_code="token_expired",
            )

        user = await self.user_repo.get_by_id(stored_token.user_id)
        if not user or not user.is_active:
            await self.token_repo.revoke(stored_token)
            raise UnauthorizedError(
                "User not found or inactive",
                error_code="user_invalid",
            )

        await self.token_repo.revoke(stored_token)
        return await self._create_tokens(user, user_agent, ip_address)

    async def logout(self, refresh_token: str) -> None:
        """Logout by revoking the refresh token."""
        stored_token = await self.token_repo.get_by_hash(hash_token(refresh_token))
        if stored_token:
            await self.token_repo.revoke(stored_token)

    async def logout_all(self, user_id: UUID) -> int:
        """Logout from all devices by revoking all refresh tokens.

        Returns:
            Number of tokens revoked
        """
        return await self.token_repo.revoke_all_for_user(user_id)

    async def _create_tokens(
        self,
        user: User,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> TokenPair:
        access_token = create_access_token(user.id)
        refresh_token = create_refresh_token()

        await self.token_repo.create(
            RefreshToken(
                user_id=user.id,
                token_hash=hash_token(refresh_token),
                expires_at=get_token_expiration(),
                user_agent=user_agent,
                ip_address=ip_address,
            )
        )

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=settings.access_token_expire_minutes * 60,
        )


# Type alias for dependency injection
AuthSvc = Annotated[AuthService, Depends(AuthService)]
