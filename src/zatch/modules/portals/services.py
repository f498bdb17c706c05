"""Portal service."""

import secrets
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends
from sqlalchemy import select

from zatch.api.dependencies import DBSession
from zatch.core.constants import FEED_TOKEN_BYTES
from zatch.core.database.tenant import TenantSession
from zatch.core.errors import NotFoundError, UnauthorizedError
from zatch.core.utils.text import generate_slug
from zatch.modules.portals.feeds import render_feed
from zatch.modules.portals.models import Portal
from zatch.modules.portals.schemas import FeedConfig, PortalCreate, PortalUpdate
from zatch.modules.properties.repos import PropertyRepository
from zatch.modules.tenants.models import DomainType
from zatch.modules.tenants.repos import DomainRepository


logger = structlog.get_logger()


def generate_feed_token() -> str:
    return secrets.token_urlsafe(FEED_TOKEN_BYTES)


class PortalService:
    """Portal integrations and the feeds they pull."""

    def __init__(self, db: DBSession) -> None:
        self.db = db

    async def list_portals(self, tenant_id: UUID) -> list[Portal]:
        stmt = select(Portal).order_by(Portal.name)
        return await TenantSession(self.db, tenant_id).scalars(stmt)

    async def get_portal(self, tenant_id: UUID, portal_id: UUID) -> Portal:
        portal = await TenantSession(self.db, tenant_id).get(Portal, portal_id)
        if portal is None:
            raise NotFoundError("Portal not found", resource="portal", resource_id=str(portal_id))
        return portal

    async def _unique_slug(self, scoped: TenantSession, source: str) -> str:
        base = generate_slug(source) or "portal"
        candidate, suffix = base, 2
        while await scoped.scalar(select(Portal.id).where(Portal.slug == candidate)) is not None:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    async def create_portal(self, tenant_id: UUID, data: PortalCreate) -> Portal:
        scoped = TenantSession(self.db, tenant_id)
        portal = Portal(
            tenant_id=tenant_id,
            name=data.name,
            slug=await self._unique_slug(scoped, data.slug or data.name),
            feed_format=data.feed_format.value,
            feed_token=generate_feed_token(),
            active=data.active,
            config=data.config.model_dump(),
        )
        scoped.add(portal)
        await scoped.flush()
        await scoped.refresh(portal)
        logger.info("portal_created", tenant_id=str(tenant_id), portal=portal.slug)
        return portal

    async def update_portal(self, tenant_id: UUID, portal_id: UUID, data: PortalUpdate) -> Portal:
        portal = await self.get_portal(tenant_id, portal_id)
        if data.name is not None:
            portal.name = data.name
        if data.feed_format is not None:
            portal.feed_format = data.feed_format.value
        if data.active is not None:
            portal.active = data.active
        if data.config is not None:
            portal.config = data.config.model_dump()
        await self.db.flush()
        await self.db.refresh(portal)
        return portal

    async def delete_portal(self, tenant_id: UUID, portal_id: UUID) -> None:
        portal = await self.get_portal(tenant_id, portal_id)
        await self.db.delete(portal)
        await self.db.flush()
        logger.info("portal_deleted", tenant_id=str(tenant_id), portal=portal.slug)

    async def regenerate_token(self, tenant_id: UUID, portal_id: UUID) -> Portal:
        """Issue a new feed token. The old feed URL stops working."""
        portal = await self.get_portal(tenant_id, portal_id)
        portal.feed_token = generate_feed_token()
        await self.db.flush()
        await self.db.refresh(portal)
        logger.info("portal_token_regenerated", tenant_id=str(tenant_id), portal=portal.slug)
        return portal

    async def get_feed_portal(self, portal_slug: str, token: str | None) -> Portal:
        """Find the active portal a feed request addresses.

        Feed URLs carry no tenant hostname; the token identifies the tenant.

        Raises:
            UnauthorizedError: If the token is missing or does not match
        """
        if not token:
            raise UnauthorizedError("Feed token required", error_code="feed_token_required")

        stmt = select(Portal).where(Portal.feed_token == token, Portal.active == True)  # noqa: E712
        portal = (await self.db.execute(stmt)).scalar_one_or_none()
        if portal is None or not secrets.compare_digest(portal.slug, portal_slug):
            logger.warning("feed_token_rejected", portal=portal_slug)
            raise UnauthorizedError("Invalid feed token", error_code="invalid_feed_token")
        return portal

    async def build_feed(self, portal: Portal, base_url: str) -> tuple[str, str]:
        """Render ``portal``'s feed.

        Listing links point at the agency's primary public domain when it has
        one, otherwise at ``base_url``.

        Returns:
            Tuple of (body, media type)
        """
        config = FeedConfig.from_stored(portal.config)
        repo = PropertyRepository(TenantSession(self.db, portal.tenant_id))
        properties = await repo.list_all(active_only=config.filtros.apenas_ativos)

        site = await DomainRepository(self.db).primary_for_tenant(
            portal.tenant_id, DomainType.PUBLIC.value
        )
        if site is not None:
            base_url = f"https://{site.hostname}"

        body, media_type = render_feed(portal.feed_format, properties, config, base_url)
        logger.info(
            "portal_feed_served",
            tenant_id=str(portal.tenant_id),
            portal=portal.slug,
            feed_format=portal.feed_format,
        )
        return body, media_type


# Type alias for dependency injection
PortalSvc = Annotated[PortalService, Depends(PortalService)]
