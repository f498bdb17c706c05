"""Property routes for the back office and the public storefront."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from zatch.core.permissions import require_permission
from zatch.modules.properties.schemas import (
    PropertyCreate,
    PropertyFilters,
    PropertyImagesReplace,
    PropertyListResponse,
    PropertyResponse,
    PropertyUpdate,
)
from zatch.modules.properties.services import PropertySvc
from zatch.modules.tenants.context import MemberContext, PublicContext


router = APIRouter(tags=["properties"])


def _page(items: list, total: int, filters: PropertyFilters) -> PropertyListResponse:
    return PropertyListResponse(
        items=[PropertyResponse.model_validate(item) for item in items],
        total=total,
        page=filters.page,
        page_size=filters.page_size,
    )


# ============================================================
# Back office
# ============================================================


@router.get(
    "/properties",
    response_model=PropertyListResponse,
    summary="List properties",
    description="Paginated list with status, type, active and free-text filters.",
)
@require_permission("properties", "view")
async def list_properties(
    filters: Annotated[PropertyFilters, Query()],
    context: MemberContext,
    service: PropertySvc,
) -> PropertyListResponse:
    items, total = await service.list_properties(context.tenant.id, filters)
    return _page(items, total, filters)


@router.get("/properties/{property_id}", response_model=PropertyResponse, summary="Get a property")
@require_permission("properties", "view")
async def get_property(
    property_id: UUID,
    context: MemberContext,
    service: PropertySvc,
) -> PropertyResponse:
    prop = await service.get_property(context.tenant.id, property_id)
    return PropertyResponse.model_validate(prop)


@router.post(
    "/properties",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a property",
)
@require_permission("properties", "create")
async def create_property(
    data: PropertyCreate,
    context: MemberContext,
    service: PropertySvc,
) -> PropertyResponse:
    prop = await service.create_property(context.tenant.id, data)
    return PropertyResponse.model_validate(prop)


@router.patch(
    "/properties/{property_id}",
    response_model=PropertyResponse,
    summary="Update a property",
)
@require_permission("properties", "edit")
async def update_property(
    property_id: UUID,
    data: PropertyUpdate,
    context: MemberContext,
    service: PropertySvc,
) -> PropertyResponse:
    prop = await service.update_property(context.tenant.id, property_id, data)
    return PropertyResponse.model_validate(prop)


@router.put(
    "/properties/{property_id}/images",
    response_model=PropertyResponse,
    summary="Replace a property's photos",
)
@require_permission("properties", "edit")
async def replace_images(
    property_id: UUID,
    data: PropertyImagesReplace,
    context: MemberContext,
    service: PropertySvc,
) -> PropertyResponse:
    prop = await service.replace_images(context.tenant.id, property_id, data.images)
    return PropertyResponse.model_validate(prop)


@router.delete(
    "/properties/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a property",
)
@require_permission("properties", "delete")
async def delete_property(
    property_id: UUID,
    context: MemberContext,
    service: PropertySvc,
) -> None:
    await service.delete_property(context.tenant.id, property_id)


# ============================================================
# Storefront
# ============================================================


@router.get(
    "/public/properties",
    response_model=PropertyListResponse,
    summary="Search the catalogue",
    description="Active properties of the agency behind the public hostname.",
)
async def search_public_properties(
    filters: Annotated[PropertyFilters, Query()],
    context: PublicContext,
    service: PropertySvc,
) -> PropertyListResponse:
    items, total = await service.search_public(context.tenant.id, filters)
    return _page(items, total, filters)


@router.get(
    "/public/properties/{slug}",
    response_model=PropertyResponse,
    summary="Property detail",
    description="Counts one view per request.",
)
async def get_public_property(
    slug: str,
    context: PublicContext,
    service: PropertySvc,
) -> PropertyResponse:
    prop = await service.get_public(context.tenant.id, slug)
    return PropertyResponse.model_validate(prop)
