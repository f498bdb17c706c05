"""Tenant-scoped database session.

Repositories for tenant-owned rows (properties, messages, portals, site
configuration) go through this wrapper so that a query can never leak rows
belonging to another tenant.
"""

from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import Select
from sqlalchemy.ext.asyncio import AsyncSession


if TYPE_CHECKING:
    from sqlalchemy.sql import ColumnElement


class TenantSession:
    """Wraps AsyncSession with automatic tenant filtering.

    Usage:
        scoped = TenantSession(session, tenant.id)
        result = await scoped.execute(select(Property))
    """

    def __init__(self, session: AsyncSession, tenant_id: UUID) -> None:
        self.session = session
        self.tenant_id = tenant_id

    def scope(self, statement: Select[Any]) -> Select[Any]:
        """Add a ``tenant_id`` filter for every tenant-owned entity selected."""
        for desc in statement.column_descriptions:
            entity = desc.get("entity")
            if entity is not None and hasattr(entity, "tenant_id"):
                tenant_column: ColumnElement[UUID] = entity.tenant_id
                statement = statement.where(tenant_column == self.tenant_id)
        return statement

    async def execute(self, statement: Select[Any]) -> Any:
        """Execute a select with the tenant filter applied."""
        return await self.session.execute(self.scope(statement))

    async def scalars(self, statement: Select[Any]) -> list[Any]:
        """Execute a select and return all scalar rows."""
        result = await self.execute(statement)
        return list(result.scalars().all())

    async def scalar(self, statement: Select[Any]) -> Any:
        """Execute a select and return the first scalar or None."""
        result = await self.execute(statement)
        return result.scalar_one_or_none()

    async def get(self, entity: type[Any], ident: Any) -> Any | None:
        """Get an entity by ID, hiding rows owned by other tenants."""
        obj = await self.session.get(entity, ident)
        if (
            obj is not None
            and hasattr(obj, "tenant_id")
            and obj.tenant_id != self.tenant_id
        ):
            return None
        return obj

    def add(self, instance: Any) -> None:
        """Add an instance, stamping the current tenant on it."""
        if getattr(instance, "tenant_id", None) is None:
            instance.tenant_id = self.tenant_id
        self.session.add(instance)

    async def delete(self, instance: Any) -> None:
        """Delete an instance owned by the current tenant."""
        await self.session.delete(instance)

    async def flush(self) -> None:
        """Flush pending changes to the database."""
        await self.session.flush()

    async def refresh(self, instance: Any) -> None:
        """Refresh an instance from the database."""
        await self.session.refresh(instance)
