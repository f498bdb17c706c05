"""Authentication schemas for token handling."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class TokenData(BaseModel):
    """Data extracted from a JWT token.

    Tokens identify a user only. The tenant a request acts on is always
    derived from the hostname, never from the token.

    Attributes:
        user_id: The user's UUID
        exp: Token expiration time
        type: Token type (access or refresh)
        jti: Unique token ID
    """

    user_id: UUID
    exp: datetime
    type: str = "access"
    jti: str | None = None


class TokenPair(BaseModel):
    """A pair of access and refresh tokens.

    Attributes:
        access_token: Short-lived JWT for API access
        refresh_token: Long-lived token for getting new access tokens
        token_type: Always "bearer"
        expires_in: Access token expiration in seconds
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
