"""Tenant, domain and membership database models."""

from enum import StrEnum
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, Boolean, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from zatch.core.constants import (
    MAX_HOSTNAME_LENGTH,
    MAX_NAME_LENGTH,
    MAX_ROLE_LENGTH,
    MAX_SLUG_LENGTH,
    VERIFY_TOKEN_LENGTH,
)
from zatch.core.database.base import Base, TenantMixin, TimestampMixin, UUIDMixin
from zatch.modules.users.models import User


class TenantStatus(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class DomainType(StrEnum):
    """Which surface a hostname serves."""

    ADMIN = "admin"
    PUBLIC = "public"


class MemberRole(StrEnum):
    OWNER = "owner"
    ADMIN = "admin"
    AGENT = "agent"


class Tenant(Base, UUIDMixin, TimestampMixin):
    """A real-estate agency.

    Every listing, domain, message and setting hangs off a tenant.
    """

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(
        String(MAX_NAME_LENGTH),
        nullable=False,
        index=True,
    )
    slug: Mapped[str] = mapped_column(
        String(MAX_SLUG_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    status: Mapped[str] = mapped_column(
        String(16),
        default=TenantStatus.ACTIVE.value,
        nullable=False,
    )
    settings: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)

    @property
    def is_active(self) -> bool:
        return self.status == TenantStatus.ACTIVE

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, slug={self.slug}, status={self.status})>"


class Domain(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """A hostname routed to a tenant.

    Hostnames are stored lowercase and are unique across all tenants. A
    domain only resolves once ``verified`` has been flipped by a successful
    DNS TXT check.
    """

    __tablename__ = "domains"

    hostname: Mapped[str] = mapped_column(
        String(MAX_HOSTNAME_LENGTH),
        nullable=False,
        unique=True,
        index=True,
    )
    type: Mapped[str] = mapped_column(
        String(16),
        default=DomainType.ADMIN.value,
        nullable=False,
    )
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    verify_token: Mapped[str] = mapped_column(
        String(VERIFY_TOKEN_LENGTH),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<Domain(hostname={self.hostname}, type={self.type}, "
            f"verified={self.verified})>"
        )


class TenantUser(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """Membership of a user in a tenant. The role is the only authorization signal."""

    __tablename__ = "tenant_users"
    __table_args__ = (UniqueConstraint("tenant_id", "user_id", name="uq_tenant_user"),)

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(
        String(MAX_ROLE_LENGTH),
        default=MemberRole.AGENT.value,
        nullable=False,
    )

    user: Mapped[User] = relationship(User, lazy="selectin")

    def __repr__(self) -> str:
        return (
            f"<TenantUser(tenant_id={self.tenant_id}, user_id={self.user_id}, "
            f"role={self.role})>"
        )
