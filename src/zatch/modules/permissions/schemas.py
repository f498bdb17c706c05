"""Pydantic schemas for the role permission grid."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from zatch.core.permissions import PermissionAction
from zatch.modules.tenants.models import MemberRole


class RolePermissionResponse(BaseModel):
    id: UUID
    role: str
    page_key: str
    can_view: bool
    can_create: bool
    can_edit: bool
    can_delete: bool

    model_config = ConfigDict(from_attributes=True)


class PermissionCellUpdate(BaseModel):
    """Set one action of one role on one page."""

    action: PermissionAction
    value: bool


class MyPermissionsResponse(BaseModel):
    role: MemberRole | None
    permissions: dict[str, dict[str, bool]]
