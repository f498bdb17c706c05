"""Property service."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends

from zatch.api.dependencies import DBSession
from zatch.core.constants import MAX_PAGE_SIZE, MAX_PROPERTY_SLUG_LENGTH
from zatch.core.database.tenant import TenantSession
from zatch.core.errors import NotFoundError
from zatch.core.utils.text import generate_slug
from zatch.modules.properties.models import Property, PropertyImage
from zatch.modules.properties.repos import PropertyRepository
from zatch.modules.properties.schemas import (
    PropertyCreate,
    PropertyFilters,
    PropertyImageIn,
    PropertyUpdate,
)


logger = structlog.get_logger()


class PropertyService:
    """Listing management for the back office and lookups for the storefront."""

    def __init__(self, db: DBSession) -> None:
        self.db = db

    def repo(self, tenant_id: UUID) -> PropertyRepository:
        return PropertyRepository(TenantSession(self.db, tenant_id))

    async def unique_slug(
        self,
        repo: PropertyRepository,
        source: str,
        exclude_id: UUID | None = None,
    ) -> str:
        """Slugify ``source`` and add ``-2``, ``-3``... until unused in the tenant."""
        base = generate_slug(source, MAX_PROPERTY_SLUG_LENGTH) or "imovel"
        candidate, suffix = base, 2
        while await repo.slug_exists(candidate, exclude_id):
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    async def list_properties(
        self, tenant_id: UUID, filters: PropertyFilters
    ) -> tuple[list[Property], int]:
        filters.page_size = min(filters.page_size, MAX_PAGE_SIZE)
        return await self.repo(tenant_id).search(filters)

    async def get_property(self, tenant_id: UUID, property_id: UUID) -> Property:
        prop = await self.repo(tenant_id).get_by_id(property_id)
        if prop is None:
            raise NotFoundError(
                "Property not found",
                resource="property",
                resource_id=str(property_id),
            )
        return prop

    async def create_property(self, tenant_id: UUID, data: PropertyCreate) -> Property:
        repo = self.repo(tenant_id)
        values = data.model_dump(exclude={"slug", "images"}, mode="json")
        prop = Property(
            **values,
            tenant_id=tenant_id,
            slug=await self.unique_slug(repo, data.slug or data.title),
            images=_build_images(data.images),
        )
        prop = await repo.create(prop)
        logger.info("property_created", tenant_id=str(tenant_id), property_id=str(prop.id))
        return prop

    async def update_property(
        self,
        tenant_id: UUID,
        property_id: UUID,
        data: PropertyUpdate,
    ) -> Property:
        repo = self.repo(tenant_id)
        prop = await self.get_property(tenant_id, property_id)

        changes = data.model_dump(exclude_unset=True, mode="json")
        slug = changes.pop("slug", None)
        if slug and slug != prop.slug:
            prop.slug = await self.unique_slug(repo, slug, exclude_id=prop.id)

        for field, value in changes.items():
            if value is None and field in _REQUIRED_FIELDS:
                continue
            setattr(prop, field, value)

        prop = await repo.update(prop)
        logger.info("property_updated", tenant_id=str(tenant_id), property_id=str(prop.id))
        return prop

    async def delete_property(self, tenant_id: UUID, property_id: UUID) -> None:
        prop = await self.get_property(tenant_id, property_id)
        await self.repo(tenant_id).delete(prop)
        logger.info("property_deleted", tenant_id=str(tenant_id), property_id=str(property_id))

    async def replace_images(
        self,
        tenant_id: UUID,
        property_id: UUID,
        images: list[PropertyImageIn],
    ) -> Property:
        prop = await self.get_property(tenant_id, property_id)
        return await self.repo(tenant_id).replace_images(prop, _build_images(images))

    # ------------------------------------------------------------
    # Storefront
    # ------------------------------------------------------------

    async def search_public(
        self, tenant_id: UUID, filters: PropertyFilters
    ) -> tuple[list[Property], int]:
        """Search the storefront catalogue. Inactive listings never show."""
        filters.active = True
        return await self.list_properties(tenant_id, filters)

    async def get_public(self, tenant_id: UUID, slug: str) -> Property:
        """Active property by slug. Each call counts as one view."""
        repo = self.repo(tenant_id)
        prop = await repo.get_by_slug(slug, active_only=True)
        if prop is None:
            raise NotFoundError("Property not found", resource="property", resource_id=slug)
        await repo.increment(prop, "views")
        return prop


_REQUIRED_FIELDS = frozenset(
    {
        "title", "type", "status", "profile", "price", "address_city",
        "address_state", "bedrooms", "suites", "bathrooms", "garages", "area",
        "features", "amenities", "financing", "documentation", "condo_exempt",
        "featured", "active", "order_index",
    }
)


def _build_images(images: list[PropertyImageIn]) -> list[PropertyImage]:
    return [
        PropertyImage(url=str(image.url), alt=image.alt, order_index=index)
        for index, image in enumerate(images)
    ]


# Type alias for dependency injection
PropertySvc = Annotated[PropertyService, Depends(PropertyService)]
