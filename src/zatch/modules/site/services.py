"""Site configuration, crawler pages and SEO generation services."""

import uuid
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends
from sqlalchemy import select

from zatch.api.dependencies import DBSession
from zatch.config import settings
from zatch.core.database.tenant import TenantSession
from zatch.core.errors import AppException, NotFoundError, RateLimitError
from zatch.modules.properties.models import Property
from zatch.modules.properties.repos import PropertyRepository
from zatch.modules.site.ai import SeoGenerator, get_seo_generator
from zatch.modules.site.models import SiteConfig
from zatch.modules.site.schemas import PropertySeoResponse, SeoBatchResponse, SiteConfigUpdate


logger = structlog.get_logger()


class SiteService:
    """Per-tenant storefront settings and the pages crawlers read."""

    def __init__(self, db: DBSession) -> None:
        self.db = db

    async def get_config(self, tenant_id: UUID) -> SiteConfig | None:
        return await TenantSession(self.db, tenant_id).scalar(select(SiteConfig))

    async def update_config(self, tenant_id: UUID, data: SiteConfigUpdate) -> SiteConfig:
        """Create or update the tenant's site configuration."""
        scoped = TenantSession(self.db, tenant_id)
        config = await self.get_config(tenant_id)
        if config is None:
            config = SiteConfig(tenant_id=tenant_id)
            scoped.add(config)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(config, field, value)

        await scoped.flush()
        await scoped.refresh(config)
        logger.info("site_config_updated", tenant_id=str(tenant_id))
        return config

    async def sitemap_properties(self, tenant_id: UUID) -> list[Property]:
        return await PropertyRepository(TenantSession(self.db, tenant_id)).list_all(
            active_only=True
        )

    async def share_property(self, tenant_id: UUID, id_or_slug: str) -> Property:
        """Active property by id or slug. Each call counts as one share."""
        repo = PropertyRepository(TenantSession(self.db, tenant_id))

        prop = None
        try:
            prop = await repo.get_by_id(uuid.UUID(id_or_slug))
        except ValueError:
            pass
        if prop is None or not prop.active:
            prop = await repo.get_by_slug(id_or_slug, active_only=True)
        if prop is None:
            raise NotFoundError("Property not found", resource="property", resource_id=id_or_slug)

        await repo.increment(prop, "shares")
        return prop


class SeoService:
    """Writes AI-generated SEO text onto properties."""

    def __init__(
        self,
        db: DBSession,
        generator: Annotated[SeoGenerator, Depends(get_seo_generator)],
    ) -> None:
        self.db = db
        self.generator = generator

    async def _apply(self, repo: PropertyRepository, prop: Property) -> PropertySeoResponse:
        seo = await self.generator.generate(prop)
        prop.seo_title = seo.seo_title
        prop.seo_description = seo.seo_description
        await repo.update(prop)
        return PropertySeoResponse(property_id=prop.id, **seo.model_dump())

    async def generate_for_property(self, tenant_id: UUID, property_id: UUID) -> PropertySeoResponse:
        repo = PropertyRepository(TenantSession(self.db, tenant_id))
        prop = await repo.get_by_id(property_id)
        if prop is None:
            raise NotFoundError(
                "Property not found",
                resource="property",
                resource_id=str(property_id),
            )
        result = await self._apply(repo, prop)
        logger.info("seo_generated", tenant_id=str(tenant_id), property_id=str(property_id))
        return result

    async def generate_batch(self, tenant_id: UUID, limit: int | None = None) -> SeoBatchResponse:
        """Fill in SEO text for active properties that lack it.

        A rate-limit answer stops the batch; other failures are counted and
        skipped.
        """
        repo = PropertyRepository(TenantSession(self.db, tenant_id))
        pending = await repo.list_missing_seo(limit or settings.seo_batch_limit)

        results: list[PropertySeoResponse] = []
        errors = 0
        for prop in pending:
            try:
                results.append(await self._apply(repo, prop))
            except RateLimitError:
                logger.warning("seo_batch_rate_limited", processed=len(results))
                errors += 1
                break
            except AppException as exc:
                logger.warning("seo_batch_item_failed", property_id=str(prop.id), error=exc.message)
                errors += 1

        logger.info(
            "seo_batch_completed",
            tenant_id=str(tenant_id),
            processed=len(results),
            errors=errors,
        )
        return SeoBatchResponse(
            processed=len(results),
            errors=errors,
            total=len(pending),
            results=results,
        )


# Type aliases for dependency injection
SiteSvc = Annotated[SiteService, Depends(SiteService)]
SeoSvc = Annotated[SeoService, Depends(SeoService)]
