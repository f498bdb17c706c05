"""Role permission grid routes.

The grid is global: a change applies to the role in every agency.
"""

import structlog
from fastapi import APIRouter

from zatch.core.errors import ForbiddenError
from zatch.core.permissions import FULL_ACCESS_ROLES, PageKey, require_permission
from zatch.modules.permissions.schemas import (
    MyPermissionsResponse,
    PermissionCellUpdate,
    RolePermissionResponse,
)
from zatch.modules.tenants.context import MemberContext
from zatch.modules.tenants.models import MemberRole


logger = structlog.get_logger()

router = APIRouter(prefix="/role-permissions", tags=["permissions"])


@router.get("", response_model=list[RolePermissionResponse], summary="Role permission grid")
@require_permission("settings", "view")
async def list_role_permissions(context: MemberContext) -> list[RolePermissionResponse]:
    rows = await context.permissions.list_rows()
    return [RolePermissionResponse.model_validate(row) for row in rows]


@router.get("/me", response_model=MyPermissionsResponse, summary="My effective permissions")
async def my_permissions(context: MemberContext) -> MyPermissionsResponse:
    grid = await context.permissions.permissions_for(context.role)
    return MyPermissionsResponse(
        role=context.role,  # type: ignore[arg-type]
        permissions={page: perms.as_dict() for page, perms in grid.items()},
    )


@router.patch(
    "/{role}/{page_key}",
    response_model=RolePermissionResponse,
    summary="Change one cell of the grid",
    description="Owners and admins only. Their own rows always grant full access.",
)
@require_permission("settings", "edit")
async def update_role_permission(
    role: MemberRole,
    page_key: PageKey,
    data: PermissionCellUpdate,
    context: MemberContext,
) -> RolePermissionResponse:
    if context.role not in FULL_ACCESS_ROLES:
        raise ForbiddenError(
            "Only owners and admins can change permissions",
            error_code="permission_denied",
        )
    row = await context.permissions.update_permission(
        role.value, page_key.value, data.action.value, data.value
    )
    logger.info(
        "role_permission_changed_by",
        user_id=str(context.user.id),
        tenant_id=str(context.tenant.id),
    )
    return RolePermissionResponse.model_validate(row)
