"""Site configuration database model."""

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from zatch.core.constants import MAX_EMAIL_LENGTH, MAX_TITLE_LENGTH
from zatch.core.database.base import Base, TenantMixin, TimestampMixin, UUIDMixin


class SiteConfig(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """Branding, SEO defaults and contact channels of one storefront."""

    __tablename__ = "site_configs"
    __table_args__ = (UniqueConstraint("tenant_id", name="uq_site_configs_tenant"),)

    seo_title: Mapped[str | None] = mapped_column(String(MAX_TITLE_LENGTH), nullable=True)
    seo_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    seo_keywords: Mapped[str | None] = mapped_column(Text, nullable=True)
    og_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    logo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    favicon_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    primary_color: Mapped[str | None] = mapped_column(String(20), nullable=True)
    secondary_color: Mapped[str | None] = mapped_column(String(20), nullable=True)
    accent_color: Mapped[str | None] = mapped_column(String(20), nullable=True)

    hero_title: Mapped[str | None] = mapped_column(String(MAX_TITLE_LENGTH), nullable=True)
    hero_subtitle: Mapped[str | None] = mapped_column(Text, nullable=True)
    about_title: Mapped[str | None] = mapped_column(String(MAX_TITLE_LENGTH), nullable=True)
    about_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    footer_text: Mapped[str | None] = mapped_column(Text, nullable=True)

    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    whatsapp: Mapped[str | None] = mapped_column(String(30), nullable=True)
    email: Mapped[str | None] = mapped_column(String(MAX_EMAIL_LENGTH), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    social_facebook: Mapped[str | None] = mapped_column(Text, nullable=True)
    social_instagram: Mapped[str | None] = mapped_column(Text, nullable=True)
    social_linkedin: Mapped[str | None] = mapped_column(Text, nullable=True)
    social_youtube: Mapped[str | None] = mapped_column(Text, nullable=True)
