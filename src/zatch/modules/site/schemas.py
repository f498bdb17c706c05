"""Pydantic schemas for site configuration and SEO generation."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from zatch.core.constants import MAX_TITLE_LENGTH


class SiteConfigFields(BaseModel):
    seo_title: str | None = Field(None, max_length=MAX_TITLE_LENGTH)
    seo_description: str | None = None
    seo_keywords: str | None = None
    og_image_url: str | None = None

    logo_url: str | None = None
    favicon_url: str | None = None
    primary_color: str | None = Field(None, max_length=20)
    secondary_color: str | None = Field(None, max_length=20)
    accent_color: str | None = Field(None, max_length=20)

    hero_title: str | None = Field(None, max_length=MAX_TITLE_LENGTH)
    hero_subtitle: str | None = None
    about_title: str | None = Field(None, max_length=MAX_TITLE_LENGTH)
    about_text: str | None = None
    footer_text: str | None = None

    phone: str | None = Field(None, max_length=30)
    whatsapp: str | None = Field(None, max_length=30)
    email: EmailStr | None = None
    address: str | None = None
    social_facebook: str | None = None
    social_instagram: str | None = None
    social_linkedin: str | None = None
    social_youtube: str | None = None


class SiteConfigUpdate(SiteConfigFields):
    """Fields left out of the payload keep their current value."""


class SiteConfigResponse(SiteConfigFields):
    email: str | None = None

    model_config = ConfigDict(from_attributes=True)


class SeoText(BaseModel):
    seo_title: str
    seo_description: str


class PropertySeoResponse(SeoText):
    property_id: UUID


class SeoBatchResponse(BaseModel):
    processed: int
    errors: int
    total: int
    results: list[PropertySeoResponse] = []
