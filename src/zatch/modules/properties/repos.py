"""Property repository. Every query is scoped to one tenant."""

from typing import Any
from uuid import UUID

from sqlalchemy import Select, func, or_, select, update

from zatch.core.database.tenant import TenantSession
from zatch.modules.properties.models import Property, PropertyImage
from zatch.modules.properties.schemas import PropertyFilters


class PropertyRepository:
    """Repository for Property database operations within a tenant."""

    def __init__(self, db: TenantSession) -> None:
        self.db = db

    @property
    def tenant_id(self) -> UUID:
        return self.db.tenant_id

    async def create(self, prop: Property) -> Property:
        self.db.add(prop)
        await self.db.flush()
        return await self.reload(prop.id)

    async def reload(self, property_id: UUID) -> Property:
        """Fetch a property again, replacing stale attributes and images."""
        stmt = (
            select(Property)
            .where(Property.id == property_id)
            .execution_options(populate_existing=True)
        )
        return await self.db.scalar(stmt)

    async def get_by_id(self, property_id: UUID) -> Property | None:
        return await self.db.get(Property, property_id)

    async def get_by_slug(self, slug: str, active_only: bool = False) -> Property | None:
        stmt = select(Property).where(Property.slug == slug)
        if active_only:
            stmt = stmt.where(Property.active == True)  # noqa: E712
        return await self.db.scalar(stmt)

    async def get_by_reference(self, reference: str) -> Property | None:
        stmt = select(Property).where(Property.reference == reference).limit(1)
        return await self.db.scalar(stmt)

    async def slug_exists(self, slug: str, exclude_id: UUID | None = None) -> bool:
        stmt = select(Property.id).where(Property.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(Property.id != exclude_id)
        return bool(await self.db.scalars(stmt))

    async def search(self, filters: PropertyFilters) -> tuple[list[Property], int]:
        """List properties matching ``filters``.

        Returns:
            Tuple of (properties on the requested page, total matches)
        """
        stmt = self.db.scope(_apply_filters(select(Property), filters))

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = (await self.db.session.execute(count_stmt)).scalar_one()

        offset = (filters.page - 1) * filters.page_size
        page_stmt = (
            stmt.order_by(
                Property.featured.desc(),
                Property.order_index,
                Property.created_at.desc(),
            )
            .offset(offset)
            .limit(filters.page_size)
        )
        result = await self.db.session.execute(page_stmt)
        return list(result.scalars().all()), total

    async def list_all(self, active_only: bool = False) -> list[Property]:
        stmt = select(Property).order_by(Property.order_index, Property.created_at)
        if active_only:
            stmt = stmt.where(Property.active == True)  # noqa: E712
        return await self.db.scalars(stmt)

    async def list_missing_seo(self, limit: int) -> list[Property]:
        """Active properties without an SEO title or description."""
        stmt = (
            select(Property)
            .where(
                Property.active == True,  # noqa: E712
                or_(
                    Property.seo_title.is_(None),
                    Property.seo_title == "",
                    Property.seo_description.is_(None),
                    Property.seo_description == "",
                ),
            )
            .order_by(Property.created_at)
            .limit(limit)
        )
        return await self.db.scalars(stmt)

    async def update(self, prop: Property) -> Property:
        await self.db.flush()
        await self.db.refresh(prop)
        return prop

    async def delete(self, prop: Property) -> None:
        await self.db.delete(prop)
        await self.db.flush()

    async def replace_images(self, prop: Property, images: list[PropertyImage]) -> Property:
        prop.images.clear()
        await self.db.flush()
        for index, image in enumerate(images):
            image.order_index = index
            prop.images.append(image)
        await self.db.flush()
        return await self.reload(prop.id)

    async def increment(self, prop: Property, counter: str) -> None:
        """Atomically add one to the ``views`` or ``shares`` counter."""
        column = getattr(Property, counter)
        stmt = (
            update(Property)
            .where(Property.id == prop.id, Property.tenant_id == self.tenant_id)
            .values({counter: column + 1})
            .execution_options(synchronize_session=False)
        )
        await self.db.session.execute(stmt)
        await self.db.refresh(prop)

    async def stats(self) -> dict[str, Any]:
        """Aggregate counts for the dashboard."""
        totals_stmt = select(
            func.count(Property.id),
            func.coalesce(func.sum(Property.views), 0),
            func.coalesce(func.sum(Property.shares), 0),
        ).where(Property.tenant_id == self.tenant_id)
        total, views, shares = (await self.db.session.execute(totals_stmt)).one()

        active_stmt = select(func.count(Property.id)).where(
            Property.tenant_id == self.tenant_id,
            Property.active == True,  # noqa: E712
        )
        featured_stmt = select(func.count(Property.id)).where(
            Property.tenant_id == self.tenant_id,
            Property.featured == True,  # noqa: E712
        )
        status_stmt = (
            select(Property.status, func.count(Property.id))
            .where(Property.tenant_id == self.tenant_id)
            .group_by(Property.status)
        )

        active = (await self.db.session.execute(active_stmt)).scalar_one()
        featured = (await self.db.session.execute(featured_stmt)).scalar_one()
        by_status = {
            status: count
            for status, count in (await self.db.session.execute(status_stmt)).all()
        }
        return {
            "total": total,
            "active": active,
            "featured": featured,
            "by_status": by_status,
            "views": int(views),
            "shares": int(shares),
        }


def _apply_filters(stmt: Select[Any], filters: PropertyFilters) -> Select[Any]:
    if filters.status is not None:
        stmt = stmt.where(Property.status == filters.status.value)
    if filters.type is not None:
        stmt = stmt.where(Property.type == filters.type.value)
    if filters.city:
        stmt = stmt.where(func.lower(Property.address_city) == filters.city.strip().lower())
    if filters.neighborhood:
        stmt = stmt.where(
            func.lower(Property.address_neighborhood) == filters.neighborhood.strip().lower()
        )
    if filters.min_price is not None:
        stmt = stmt.where(Property.price >= filters.min_price)
    if filters.max_price is not None:
        stmt = stmt.where(Property.price <= filters.max_price)
    if filters.min_bedrooms is not None:
        stmt = stmt.where(Property.bedrooms >= filters.min_bedrooms)
    if filters.featured is not None:
        stmt = stmt.where(Property.featured == filters.featured)
    if filters.active is not None:
        stmt = stmt.where(Property.active == filters.active)
    if filters.search:
        term = f"%{filters.search.strip()}%"
        stmt = stmt.where(
            or_(
                Property.title.ilike(term),
                Property.description.ilike(term),
                Property.reference.ilike(term),
                Property.address_city.ilike(term),
                Property.address_neighborhood.ilike(term),
            )
        )
    return stmt
