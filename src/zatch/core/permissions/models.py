"""Role permission grid model."""

from enum import StrEnum

from sqlalchemy import Boolean, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from zatch.core.constants import MAX_PAGE_KEY_LENGTH, MAX_ROLE_LENGTH
from zatch.core.database.base import Base, TimestampMixin, UUIDMixin


class PageKey(StrEnum):
    """Back-office areas a role can be granted."""

    DASHBOARD = "dashboard"
    PROPERTIES = "properties"
    MESSAGES = "messages"
    USERS = "users"
    DATA = "data"
    SETTINGS = "settings"
    DOMAINS = "domains"
    PORTALS = "portals"


class PermissionAction(StrEnum):
    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"


class RolePermission(Base, UUIDMixin, TimestampMixin):
    """One cell row of the global role x page grid.

    The grid is shared by all tenants. A missing row means no access.
    """

    __tablename__ = "role_permissions"
    __table_args__ = (UniqueConstraint("role", "page_key", name="uq_role_page"),)

    role: Mapped[str] = mapped_column(String(MAX_ROLE_LENGTH), nullable=False, index=True)
    page_key: Mapped[str] = mapped_column(String(MAX_PAGE_KEY_LENGTH), nullable=False)
    can_view: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    can_create: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    can_edit: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    can_delete: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<RolePermission(role={self.role}, page_key={self.page_key})>"
