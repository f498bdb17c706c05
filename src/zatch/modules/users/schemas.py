"""Pydantic schemas for user operations."""

import re
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from zatch.core.constants import MAX_NAME_LENGTH, MAX_PASSWORD_LENGTH, MIN_PASSWORD_LENGTH


# ============================================================
# Password Validation
# ============================================================

# Password complexity rules: (regex pattern, human-readable name)
PASSWORD_COMPLEXITY_RULES: list[tuple[str, str]] = [
    (r"[A-Z]", "uppercase letter"),
    (r"[a-z]", "lowercase letter"),
    (r"\d", "digit"),
    (r"[!@#$%^&*(),.?\":{}|<>\[\]\;'`~_+\-=/]", "special character"),
]


def validate_password_complexity(password: str) -> str:
    """Require an uppercase letter, a lowercase letter, a digit and a symbol.

    Raises:
        ValueError: If password doesn't meet requirements
    """
    missing = [
        name
        for pattern, name in PASSWORD_COMPLEXITY_RULES
        if not re.search(pattern, password)
    ]

    if missing:
        if len(missing) == 1:
            raise ValueError(f"Password must contain at least one {missing[0]}")
        raise ValueError(f"Password must contain at least one: {', '.join(missing)}")

    return password


# ============================================================
# User Schemas
# ============================================================


class UserBase(BaseModel):
    """Base schema for user data."""

    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)


class UserUpdate(BaseModel):
    """Schema for updating the caller's profile."""

    full_name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)


class UserPasswordUpdate(BaseModel):
    """Schema for changing the caller's password."""

    current_password: str
    new_password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )

    @field_validator("new_password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Validate password complexity."""
        return validate_password_complexity(v)


class UserResponse(UserBase):
    """Schema for user response data."""

    id: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============================================================
# Authentication Schemas
# ============================================================


class LoginRequest(BaseModel):
    """Schema for email/password login."""

    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Schema for authentication token response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token expiration in seconds")


class RefreshTokenRequest(BaseModel):
    """Schema for refreshing or revoking a refresh token."""

    refresh_token: str


# ============================================================
# Registration Schemas
# ============================================================


class RegisterRequest(BaseModel):
    """Schema for user registration.

    When ``tenant_name`` is given a new agency is created as well and the
    registering user becomes its owner.
    """

    email: EmailStr
    password: str = Field(
        ..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH
    )
    full_name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    tenant_name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Validate password complexity."""
        return validate_password_complexity(v)


class RegisterResponse(BaseModel):
    """Schema for registration response."""

    user: UserResponse
    tenant_id: UUID | None = None
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
