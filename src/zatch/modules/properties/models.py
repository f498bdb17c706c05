"""Property database models."""

from enum import StrEnum
from uuid import UUID

from sqlalchemy import (
    JSON,
    Boolean,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from zatch.core.constants import (
    MAX_NAME_LENGTH,
    MAX_PROPERTY_SLUG_LENGTH,
    MAX_TITLE_LENGTH,
)
from zatch.core.database.base import Base, TenantMixin, TimestampMixin, UUIDMixin


class PropertyType(StrEnum):
    CASA = "casa"
    APARTAMENTO = "apartamento"
    TERRENO = "terreno"
    COMERCIAL = "comercial"
    RURAL = "rural"
    COBERTURA = "cobertura"
    FLAT = "flat"
    GALPAO = "galpao"
    LOFT = "loft"


class PropertyStatus(StrEnum):
    VENDA = "venda"
    ALUGUEL = "aluguel"
    VENDIDO = "vendido"
    ALUGADO = "alugado"


class PropertyProfile(StrEnum):
    RESIDENCIAL = "residencial"
    COMERCIAL = "comercial"
    INDUSTRIAL = "industrial"
    MISTO = "misto"


class DocumentationStatus(StrEnum):
    REGULAR = "regular"
    IRREGULAR = "irregular"
    PENDENTE = "pendente"


class Property(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """A listing published by an agency.

    Slugs are unique within a tenant only; two agencies may list
    ``casa-centro`` each. ``views`` and ``shares`` are counters bumped by the
    public detail page and the share page.
    """

    __tablename__ = "properties"
    __table_args__ = (UniqueConstraint("tenant_id", "slug", name="uq_properties_tenant_slug"),)

    title: Mapped[str] = mapped_column(String(MAX_TITLE_LENGTH), nullable=False)
    slug: Mapped[str] = mapped_column(String(MAX_PROPERTY_SLUG_LENGTH), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(20), default=PropertyType.CASA.value, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=PropertyStatus.VENDA.value, nullable=False, index=True
    )
    profile: Mapped[str] = mapped_column(
        String(20), default=PropertyProfile.RESIDENCIAL.value, nullable=False
    )
    price: Mapped[float] = mapped_column(Numeric(14, 2, asdecimal=False), default=0, nullable=False)

    address_street: Mapped[str | None] = mapped_column(String(MAX_NAME_LENGTH), nullable=True)
    address_neighborhood: Mapped[str | None] = mapped_column(String(MAX_NAME_LENGTH), nullable=True)
    address_city: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), default="", nullable=False)
    address_state: Mapped[str] = mapped_column(String(2), default="", nullable=False)
    address_zipcode: Mapped[str | None] = mapped_column(String(10), nullable=True)
    address_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    address_lng: Mapped[float | None] = mapped_column(Float, nullable=True)

    bedrooms: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    suites: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    bathrooms: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    garages: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    area: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    built_area: Mapped[float | None] = mapped_column(Float, nullable=True)

    features: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    amenities: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)

    financing: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    documentation: Mapped[str] = mapped_column(
        String(20), default=DocumentationStatus.REGULAR.value, nullable=False
    )
    condo_fee: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)
    condo_exempt: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    iptu: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=True)

    featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    reference: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    seo_title: Mapped[str | None] = mapped_column(String(MAX_TITLE_LENGTH), nullable=True)
    seo_description: Mapped[str | None] = mapped_column(Text, nullable=True)

    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    shares: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    images: Mapped[list["PropertyImage"]] = relationship(
        back_populates="property",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PropertyImage.order_index",
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, slug={self.slug})>"


class PropertyImage(Base, UUIDMixin, TimestampMixin):
    """A photo of a property, shown in ``order_index`` order."""

    __tablename__ = "property_images"

    property_id: Mapped[UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url: Mapped[str] = mapped_column(Text, nullable=False)
    alt: Mapped[str | None] = mapped_column(String(MAX_TITLE_LENGTH), nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    property: Mapped[Property] = relationship(back_populates="images")
