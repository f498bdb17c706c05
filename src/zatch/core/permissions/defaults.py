"""Default role permission grid."""

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zatch.core.permissions.checker import FULL_ACCESS, FULL_ACCESS_ROLES, PagePermissions
from zatch.core.permissions.models import PageKey, RolePermission


logger = structlog.get_logger()

# Agents work listings and leads; everything administrative stays closed.
AGENT_DEFAULTS: dict[PageKey, PagePermissions] = {
    PageKey.DASHBOARD: PagePermissions(can_view=True),
    PageKey.PROPERTIES: PagePermissions(can_view=True, can_create=True, can_edit=True),
    PageKey.MESSAGES: PagePermissions(can_view=True, can_edit=True),
}


def default_grid() -> dict[tuple[str, str], PagePermissions]:
    """Rows seeded for a fresh installation."""
    grid: dict[tuple[str, str], PagePermissions] = {}
    for role in sorted(FULL_ACCESS_ROLES):
        for page in PageKey:
            grid[(role, page.value)] = FULL_ACCESS
    for page in PageKey:
        grid[("agent", page.value)] = AGENT_DEFAULTS.get(page, PagePermissions())
    return grid


async def seed_default_permissions(session: AsyncSession) -> int:
    """Insert grid rows that do not exist yet. Existing rows are left alone.

    Returns:
        Number of rows created
    """
    result = await session.execute(select(RolePermission.role, RolePermission.page_key))
    existing = {(role, page_key) for role, page_key in result.all()}

    created = 0
    for (role, page_key), perms in default_grid().items():
        if (role, page_key) in existing:
            continue
        session.add(RolePermission(role=role, page_key=page_key, **perms.as_dict()))
        created += 1

    await session.flush()
    logger.info("role_permissions_seeded", created=created)
    return created
