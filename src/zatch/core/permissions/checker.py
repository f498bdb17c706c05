"""Role permission lookup.

The lookup itself is a pure function of ``(role, page_key, action)`` over
the role permission grid:

* ``owner`` and ``admin`` are allowed everything
* otherwise the matching grid row decides
* no row, an unknown page or an unknown action means no access

``PermissionChecker`` loads the grid from the database once and keeps it
for the lifetime of the checker (one request).
"""

from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from zatch.core.permissions.models import PageKey, PermissionAction, RolePermission


logger = structlog.get_logger()

# Membership roles with unrestricted access to every page
FULL_ACCESS_ROLES = frozenset({"owner", "admin"})

_ACTION_FIELDS = {
    PermissionAction.VIEW: "can_view",
    PermissionAction.CREATE: "can_create",
    PermissionAction.EDIT: "can_edit",
    PermissionAction.DELETE: "can_delete",
}


@dataclass(frozen=True)
class PagePermissions:
    can_view: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False

    def allows(self, action: str) -> bool:
        field = _ACTION_FIELDS.get(action)  # type: ignore[call-overload]
        return bool(field and getattr(self, field))

    def as_dict(self) -> dict[str, bool]:
        return asdict(self)


NO_ACCESS = PagePermissions()
FULL_ACCESS = PagePermissions(True, True, True, True)


def action_field(action: str) -> str:
    """Column name for an action, e.g. ``"edit"`` -> ``"can_edit"``.

    Raises:
        ValueError: If the action is unknown
    """
    try:
        return _ACTION_FIELDS[PermissionAction(action)]
    except ValueError:
        raise ValueError(f"Unknown permission action: {action}") from None


class RolePermissionTable:
    """In-memory role x page grid."""

    def __init__(self, grid: Mapping[tuple[str, str], PagePermissions]) -> None:
        self._grid = dict(grid)

    @classmethod
    def from_rows(cls, rows: Iterable[RolePermission]) -> "RolePermissionTable":
        return cls(
            {
                (row.role, row.page_key): PagePermissions(
                    can_view=row.can_view,
                    can_create=row.can_create,
                    can_edit=row.can_edit,
                    can_delete=row.can_delete,
                )
                for row in rows
            }
        )

    def page_permissions(self, role: str | None, page_key: str) -> PagePermissions:
        if role is None:
            return NO_ACCESS
        if role in FULL_ACCESS_ROLES:
            return FULL_ACCESS
        return self._grid.get((role, page_key), NO_ACCESS)

    def can_access(
        self,
        role: str | None,
        page_key: str,
        action: str = PermissionAction.VIEW,
    ) -> bool:
        """Whether ``role`` may perform ``action`` on ``page_key``."""
        if role in FULL_ACCESS_ROLES:
            return True
        return self.page_permissions(role, page_key).allows(action)

    def for_role(self, role: str | None) -> dict[str, PagePermissions]:
        """Effective permissions of ``role`` on every known page."""
        return {page.value: self.page_permissions(role, page.value) for page in PageKey}

    def __len__(self) -> int:
        return len(self._grid)


class PermissionChecker:
    """Loads the grid once and answers permission questions against it."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._table: RolePermissionTable | None = None

    async def list_rows(self) -> list[RolePermission]:
        stmt = select(RolePermission).order_by(RolePermission.role, RolePermission.page_key)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def load_table(self) -> RolePermissionTable:
        """Return the cached grid, fetching it on first use."""
        if self._table is None:
            self._table = RolePermissionTable.from_rows(await self.list_rows())
            logger.debug("role_permissions_loaded", rows=len(self._table))
        return self._table

    async def can_access(
        self,
        role: str | None,
        page_key: str,
        action: str = PermissionAction.VIEW,
    ) -> bool:
        if role in FULL_ACCESS_ROLES:
            return True
        table = await self.load_table()
        return table.can_access(role, page_key, action)

    async def permissions_for(self, role: str | None) -> dict[str, PagePermissions]:
        table = await self.load_table()
        return table.for_role(role)

    async def update_permission(
        self,
        role: str,
        page_key: str,
        action: str,
        value: bool,
    ) -> RolePermission:
        """Set one cell of the grid, creating the row when missing.

        Raises:
            ValueError: If the action is unknown
        """
        field = action_field(action)
        stmt = select(RolePermission).where(
            RolePermission.role == role,
            RolePermission.page_key == page_key,
        )
        result = await self.session.execute(stmt)
        row = result.scalar_one_or_none()
        if row is None:
            row = RolePermission(role=role, page_key=page_key)
            self.session.add(row)

        setattr(row, field, value)
        await self.session.flush()
        await self.session.refresh(row)

        self._table = None
        logger.info(
            "role_permission_updated",
            role=role,
            page_key=page_key,
            action=action,
            value=value,
        )
        return row
