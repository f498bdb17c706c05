"""Pydantic schemas for properties."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from zatch.core.constants import (
    DEFAULT_PAGE_SIZE,
    MAX_PROPERTY_SLUG_LENGTH,
    MAX_TITLE_LENGTH,
)
from zatch.modules.properties.models import (
    DocumentationStatus,
    PropertyProfile,
    PropertyStatus,
    PropertyType,
)


# ============================================================
# Image Schemas
# ============================================================


class PropertyImageIn(BaseModel):
    url: HttpUrl
    alt: str | None = Field(None, max_length=MAX_TITLE_LENGTH)


class PropertyImageResponse(BaseModel):
    id: UUID
    url: str
    alt: str | None
    order_index: int

    model_config = ConfigDict(from_attributes=True)


# ============================================================
# Property Schemas
# ============================================================


class PropertyBase(BaseModel):
    """Fields shared by create and response payloads."""

    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    description: str | None = None
    type: PropertyType = PropertyType.CASA
    status: PropertyStatus = PropertyStatus.VENDA
    profile: PropertyProfile = PropertyProfile.RESIDENCIAL
    price: float = Field(0, ge=0)

    address_street: str | None = None
    address_neighborhood: str | None = None
    address_city: str = ""
    address_state: str = Field("", max_length=2)
    address_zipcode: str | None = Field(None, max_length=10)
    address_lat: float | None = Field(None, ge=-90, le=90)
    address_lng: float | None = Field(None, ge=-180, le=180)

    bedrooms: int = Field(0, ge=0)
    suites: int = Field(0, ge=0)
    bathrooms: int = Field(0, ge=0)
    garages: int = Field(0, ge=0)
    area: float = Field(0, ge=0)
    built_area: float | None = Field(None, ge=0)

    features: list[str] = []
    amenities: list[str] = []

    financing: bool = False
    documentation: DocumentationStatus = DocumentationStatus.REGULAR
    condo_fee: float | None = Field(None, ge=0)
    condo_exempt: bool = False
    iptu: float | None = Field(None, ge=0)

    featured: bool = False
    active: bool = True
    reference: str | None = Field(None, max_length=50)
    seo_title: str | None = Field(None, max_length=MAX_TITLE_LENGTH)
    seo_description: str | None = None
    order_index: int = 0


class PropertyCreate(PropertyBase):
    """Create payload. A slug is derived from the title when omitted."""

    slug: str | None = Field(None, max_length=MAX_PROPERTY_SLUG_LENGTH)
    images: list[PropertyImageIn] = []


class PropertyUpdate(BaseModel):
    """Partial update. Only fields that are sent are changed."""

    title: str | None = Field(None, min_length=1, max_length=MAX_TITLE_LENGTH)
    slug: str | None = Field(None, max_length=MAX_PROPERTY_SLUG_LENGTH)
    description: str | None = None
    type: PropertyType | None = None
    status: PropertyStatus | None = None
    profile: PropertyProfile | None = None
    price: float | None = Field(None, ge=0)

    address_street: str | None = None
    address_neighborhood: str | None = None
    address_city: str | None = None
    address_state: str | None = Field(None, max_length=2)
    address_zipcode: str | None = Field(None, max_length=10)
    address_lat: float | None = Field(None, ge=-90, le=90)
    address_lng: float | None = Field(None, ge=-180, le=180)

    bedrooms: int | None = Field(None, ge=0)
    suites: int | None = Field(None, ge=0)
    bathrooms: int | None = Field(None, ge=0)
    garages: int | None = Field(None, ge=0)
    area: float | None = Field(None, ge=0)
    built_area: float | None = Field(None, ge=0)

    features: list[str] | None = None
    amenities: list[str] | None = None

    financing: bool | None = None
    documentation: DocumentationStatus | None = None
    condo_fee: float | None = Field(None, ge=0)
    condo_exempt: bool | None = None
    iptu: float | None = Field(None, ge=0)

    featured: bool | None = None
    active: bool | None = None
    reference: str | None = Field(None, max_length=50)
    seo_title: str | None = Field(None, max_length=MAX_TITLE_LENGTH)
    seo_description: str | None = None
    order_index: int | None = None


class PropertyImagesReplace(BaseModel):
    images: list[PropertyImageIn]


class PropertyResponse(PropertyBase):
    id: UUID
    slug: str
    views: int
    shares: int
    images: list[PropertyImageResponse]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PropertyListResponse(BaseModel):
    """Paginated list of properties."""

    items: list[PropertyResponse]
    total: int
    page: int
    page_size: int


# ============================================================
# Filters
# ============================================================


class PropertyFilters(BaseModel):
    """Filters shared by the admin list and the public search."""

    status: PropertyStatus | None = None
    type: PropertyType | None = None
    city: str | None = None
    neighborhood: str | None = None
    min_price: float | None = Field(None, ge=0)
    max_price: float | None = Field(None, ge=0)
    min_bedrooms: int | None = Field(None, ge=0)
    featured: bool | None = None
    active: bool | None = None
    search: str | None = None
    page: int = Field(1, ge=1)
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1)
