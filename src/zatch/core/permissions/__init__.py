"""Role x page permission grid and its enforcement."""

from zatch.core.permissions.checker import (
    FULL_ACCESS_ROLES,
    PagePermissions,
    PermissionChecker,
    RolePermissionTable,
)
from zatch.core.permissions.decorators import require_permission
from zatch.core.permissions.models import PageKey, PermissionAction, RolePermission


__all__ = [
    "FULL_ACCESS_ROLES",
    "PageKey",
    "PagePermissions",
    "PermissionAction",
    "PermissionChecker",
    "RolePermission",
    "RolePermissionTable",
    "require_permission",
]
