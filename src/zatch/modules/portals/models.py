"""Portal database model."""

from enum import StrEnum
from typing import Any

from sqlalchemy import JSON, Boolean, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from zatch.core.constants import MAX_NAME_LENGTH, MAX_SLUG_LENGTH
from zatch.core.database.base import Base, TenantMixin, TimestampMixin, UUIDMixin


class FeedFormat(StrEnum):
    XML = "xml"
    JSON = "json"
    CSV = "csv"


class Portal(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """A portal that pulls the agency's listings from a tokenised feed URL.

    ``config`` holds the feed options and filters, see ``FeedConfig``.
    """

    __tablename__ = "portals"
    __table_args__ = (UniqueConstraint("tenant_id", "slug", name="uq_portals_tenant_slug"),)

    name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), nullable=False)
    slug: Mapped[str] = mapped_column(String(MAX_SLUG_LENGTH), nullable=False, index=True)
    feed_format: Mapped[str] = mapped_column(String(10), default=FeedFormat.XML.value, nullable=False)
    feed_token: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    config: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
