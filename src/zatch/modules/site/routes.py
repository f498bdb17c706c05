"""Site configuration, SEO and crawler-facing routes.

``router`` is mounted under ``/api/v1``; ``public_router`` serves
``/robots.txt``, ``/sitemap.xml`` and ``/share/{id_or_slug}`` from the site
root where crawlers look for them.
"""

from datetime import UTC, datetime
from uuid import UUID

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from zatch.core.constants import SHARE_CACHE_SECONDS
from zatch.core.permissions import require_permission
from zatch.core.utils.hosts import request_hostname
from zatch.modules.site.pages import base_url, robots_txt, share_page_html, sitemap_xml
from zatch.modules.site.schemas import (
    PropertySeoResponse,
    SeoBatchResponse,
    SiteConfigResponse,
    SiteConfigUpdate,
)
from zatch.modules.site.services import SeoSvc, SiteSvc
from zatch.modules.tenants.context import MemberContext, PublicContext


router = APIRouter(tags=["site"])
public_router = APIRouter(tags=["seo"])


def _site_url(request: Request) -> str:
    return base_url(request.url.scheme, request_hostname(request))


# ============================================================
# Site configuration
# ============================================================


@router.get(
    "/public/site-config",
    response_model=SiteConfigResponse,
    summary="Storefront configuration",
)
async def get_public_site_config(context: PublicContext, service: SiteSvc) -> SiteConfigResponse:
    config = await service.get_config(context.tenant.id)
    if config is None:
        return SiteConfigResponse(seo_title=context.tenant.name)
    return SiteConfigResponse.model_validate(config)


@router.get("/site-config", response_model=SiteConfigResponse, summary="Get site configuration")
@require_permission("settings", "view")
async def get_site_config(context: MemberContext, service: SiteSvc) -> SiteConfigResponse:
    config = await service.get_config(context.tenant.id)
    if config is None:
        return SiteConfigResponse()
    return SiteConfigResponse.model_validate(config)


@router.put("/site-config", response_model=SiteConfigResponse, summary="Update site configuration")
@require_permission("settings", "edit")
async def update_site_config(
    data: SiteConfigUpdate,
    context: MemberContext,
    service: SiteSvc,
) -> SiteConfigResponse:
    config = await service.update_config(context.tenant.id, data)
    return SiteConfigResponse.model_validate(config)


# ============================================================
# SEO generation
# ============================================================


@router.post(
    "/properties/seo/batch",
    response_model=SeoBatchResponse,
    summary="Generate SEO text for listings missing it",
)
@require_permission("properties", "edit")
async def generate_seo_batch(
    context: MemberContext,
    service: SeoSvc,
    limit: int | None = Query(None, ge=1, le=50),
) -> SeoBatchResponse:
    return await service.generate_batch(context.tenant.id, limit)


@router.post(
    "/properties/{property_id}/seo",
    response_model=PropertySeoResponse,
    summary="Generate SEO text for a listing",
)
@require_permission("properties", "edit")
async def generate_seo(
    property_id: UUID,
    context: MemberContext,
    service: SeoSvc,
) -> PropertySeoResponse:
    return await service.generate_for_property(context.tenant.id, property_id)


# ============================================================
# Crawler pages
# ============================================================


@public_router.get("/robots.txt", response_class=PlainTextResponse, include_in_schema=False)
async def robots(request: Request) -> PlainTextResponse:
    return PlainTextResponse(
        robots_txt(_site_url(request)),
        headers={"Cache-Control": "public, max-age=86400"},
    )


@public_router.get("/sitemap.xml", include_in_schema=False)
async def sitemap(request: Request, context: PublicContext, service: SiteSvc) -> Response:
    properties = await service.sitemap_properties(context.tenant.id)
    body = sitemap_xml(_site_url(request), properties, datetime.now(UTC))
    return Response(
        body,
        media_type="application/xml",
        headers={"Cache-Control": f"public, max-age={SHARE_CACHE_SECONDS}"},
    )


@public_router.get("/share/{id_or_slug}", response_class=HTMLResponse, include_in_schema=False)
async def share_property(
    id_or_slug: str,
    request: Request,
    context: PublicContext,
    service: SiteSvc,
) -> HTMLResponse:
    prop = await service.share_property(context.tenant.id, id_or_slug)
    config = await service.get_config(context.tenant.id)

    site_url = _site_url(request)
    image_url = (
        (prop.images[0].url if prop.images else None)
        or (config.og_image_url if config else None)
        or f"{site_url}/placeholder.svg"
    )
    site_name = (config.seo_title if config else None) or context.tenant.name

    page = share_page_html(prop, f"{site_url}/imovel/{prop.slug}", image_url, site_name)
    return HTMLResponse(
        page,
        headers={"Cache-Control": f"public, max-age={SHARE_CACHE_SECONDS}"},
    )
