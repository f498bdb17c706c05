"""Pydantic schemas for portals and their feed options."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from zatch.core.constants import DEFAULT_FEED_PHOTO_LIMIT, MAX_NAME_LENGTH, MAX_SLUG_LENGTH
from zatch.modules.portals.models import FeedFormat


class FeedFilters(BaseModel):
    """Which listings a feed carries. Option names follow the portals' own terms."""

    apenas_ativos: bool = True
    apenas_venda: bool = False
    apenas_aluguel: bool = False
    apenas_destaques: bool = False
    excluir_sem_fotos: bool = False
    excluir_sem_endereco: bool = False


class FeedConfig(BaseModel):
    limite_fotos: int = Field(DEFAULT_FEED_PHOTO_LIMIT, ge=0)
    remover_html: bool = False
    preco_consulte: bool = False
    dominio_base: str | None = None
    filtros: FeedFilters = FeedFilters()

    @classmethod
    def from_stored(cls, value: dict[str, Any] | None) -> "FeedConfig":
        return cls.model_validate(value or {})


class PortalCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    slug: str | None = Field(None, max_length=MAX_SLUG_LENGTH)
    feed_format: FeedFormat = FeedFormat.XML
    active: bool = True
    config: FeedConfig = FeedConfig()


class PortalUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    feed_format: FeedFormat | None = None
    active: bool | None = None
    config: FeedConfig | None = None


class PortalResponse(BaseModel):
    id: UUID
    name: str
    slug: str
    feed_format: FeedFormat
    feed_token: str
    active: bool
    config: FeedConfig
    created_at: datetime
    feed_path: str = ""

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_portal(cls, portal: Any) -> "PortalResponse":
        response = cls.model_validate(portal)
        response.feed_path = f"/api/v1/feeds/{portal.slug}?token={portal.feed_token}"
        return response
