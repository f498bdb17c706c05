"""Portal integration and feed routes."""

from uuid import UUID

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import Response

from zatch.core.permissions import require_permission
from zatch.core.utils.hosts import request_hostname
from zatch.modules.portals.schemas import PortalCreate, PortalResponse, PortalUpdate
from zatch.modules.portals.services import PortalSvc
from zatch.modules.site.pages import base_url
from zatch.modules.tenants.context import MemberContext


router = APIRouter(tags=["portals"])


@router.get("/portals", response_model=list[PortalResponse], summary="List portals")
@require_permission("portals", "view")
async def list_portals(context: MemberContext, service: PortalSvc) -> list[PortalResponse]:
    portals = await service.list_portals(context.tenant.id)
    return [PortalResponse.from_portal(portal) for portal in portals]


@router.post(
    "/portals",
    response_model=PortalResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a portal",
)
@require_permission("portals", "create")
async def create_portal(
    data: PortalCreate,
    context: MemberContext,
    service: PortalSvc,
) -> PortalResponse:
    portal = await service.create_portal(context.tenant.id, data)
    return PortalResponse.from_portal(portal)


@router.get("/portals/{portal_id}", response_model=PortalResponse, summary="Get a portal")
@require_permission("portals", "view")
async def get_portal(portal_id: UUID, context: MemberContext, service: PortalSvc) -> PortalResponse:
    portal = await service.get_portal(context.tenant.id, portal_id)
    return PortalResponse.from_portal(portal)


@router.patch("/portals/{portal_id}", response_model=PortalResponse, summary="Update a portal")
@require_permission("portals", "edit")
async def update_portal(
    portal_id: UUID,
    data: PortalUpdate,
    context: MemberContext,
    service: PortalSvc,
) -> PortalResponse:
    portal = await service.update_portal(context.tenant.id, portal_id, data)
    return PortalResponse.from_portal(portal)


@router.delete(
    "/portals/{portal_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a portal",
)
@require_permission("portals", "delete")
async def delete_portal(portal_id: UUID, context: MemberContext, service: PortalSvc) -> None:
    await service.delete_portal(context.tenant.id, portal_id)


@router.post(
    "/portals/{portal_id}/token",
    response_model=PortalResponse,
    summary="Regenerate the feed token",
)
@require_permission("portals", "edit")
async def regenerate_token(
    portal_id: UUID,
    context: MemberContext,
    service: PortalSvc,
) -> PortalResponse:
    portal = await service.regenerate_token(context.tenant.id, portal_id)
    return PortalResponse.from_portal(portal)


@router.get(
    "/feeds/{portal_slug}",
    summary="Listing feed for a portal",
    description="Authenticated by the portal's feed token, not by hostname.",
)
async def portal_feed(
    portal_slug: str,
    request: Request,
    service: PortalSvc,
    token: str | None = Query(None),
) -> Response:
    portal = await service.get_feed_portal(portal_slug, token)
    body, media_type = await service.build_feed(
        portal, base_url(request.url.scheme, request_hostname(request))
    )
    return Response(body, media_type=media_type, headers={"Cache-Control": "private, max-age=300"})
