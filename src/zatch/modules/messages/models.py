"""Contact message database model."""

from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from zatch.core.constants import MAX_EMAIL_LENGTH, MAX_NAME_LENGTH
from zatch.core.database.base import Base, TenantMixin, TimestampMixin, UUIDMixin


class ContactMessage(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """A visitor's enquiry, optionally about one property."""

    __tablename__ = "contact_messages"

    property_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("properties.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), nullable=False)
    email: Mapped[str] = mapped_column(String(MAX_EMAIL_LENGTH), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
