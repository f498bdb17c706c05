"""Search-engine and link-preview pages: robots.txt, sitemap.xml, share page.

Everything here is a pure function of its arguments so the storefront's
crawler-facing output can be tested without a database.
"""

import html
from collections.abc import Iterable
from datetime import datetime
from urllib.parse import quote
from xml.etree import ElementTree as ET

from zatch.core.constants import SHARE_REDIRECT_SECONDS
from zatch.modules.properties.models import Property, PropertyType


TYPE_LABELS: dict[str, str] = {
    "casa": "Casa",
    "apartamento": "Apartamento",
    "terreno": "Terreno",
    "comercial": "Imóvel Comercial",
    "rural": "Imóvel Rural",
    "cobertura": "Cobertura",
    "flat": "Flat",
    "galpao": "Galpão",
    "loft": "Loft",
}

STATUS_LABELS: dict[str, str] = {
    "venda": "à Venda",
    "aluguel": "para Alugar",
}

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

# (path, changefreq, priority)
STATIC_PAGES = [
    ("/", "daily", "1.0"),
    ("/imoveis", "daily", "0.9"),
    ("/sobre", "monthly", "0.7"),
    ("/contato", "monthly", "0.7"),
]


def type_label(value: str) -> str:
    return TYPE_LABELS.get(value, "Imóvel")


def format_number(value: float) -> str:
    """``120.0`` -> ``"120"``, ``72.5`` -> ``"72.5"``."""
    return str(int(value)) if float(value).is_integer() else str(value)


def format_brl(value: float) -> str:
    """Whole-real price in Brazilian notation, e.g. ``R$ 1.250.000``."""
    return "R$ " + f"{round(value):,}".replace(",", ".")


def plural(count: int, singular: str) -> str:
    return f"{count} {singular}{'s' if count > 1 else ''}"


def base_url(scheme: str, hostname: str) -> str:
    return f"{scheme}://{hostname}"


# ============================================================
# robots.txt
# ============================================================


def robots_txt(site_url: str) -> str:
    """Crawler policy for a storefront. Back-office and auth paths stay hidden."""
    return f"""# Robots.txt for {site_url}

User-agent: Googlebot
Allow: /
Disallow: /admin/

User-agent: Bingbot
Allow: /
Disallow: /admin/

User-agent: Twitterbot
Allow: /

User-agent: facebookexternalhit
Allow: /

User-agent: LinkedInBot
Allow: /

User-agent: WhatsApp
Allow: /

User-agent: *
Allow: /
Disallow: /admin/
Disallow: /api/
Disallow: /auth/
Disallow: /painel/
Disallow: /dashboard/
Allow: /imoveis
Allow: /imovel/
Allow: /sobre
Allow: /contato

Sitemap: {site_url}/sitemap.xml

Crawl-delay: 1
"""


# ============================================================
# sitemap.xml
# ============================================================


def _url(urlset: ET.Element, loc: str, lastmod: str, changefreq: str, priority: str) -> None:
    url = ET.SubElement(urlset, "url")
    ET.SubElement(url, "loc").text = loc
    ET.SubElement(url, "lastmod").text = lastmod
    ET.SubElement(url, "changefreq").text = changefreq
    ET.SubElement(url, "priority").text = priority


def sitemap_xml(site_url: str, properties: Iterable[Property], now: datetime) -> str:
    """Sitemap with static pages, listings and per-location search pages.

    Location pages are emitted per city, per neighborhood of that city and
    per city and property type.
    """
    generated = now.isoformat()
    urlset = ET.Element("urlset", xmlns=SITEMAP_NS)

    for path, changefreq, priority in STATIC_PAGES:
        _url(urlset, f"{site_url}{path}", generated, changefreq, priority)

    cities: dict[str, list[str]] = {}
    for prop in properties:
        lastmod = prop.updated_at.isoformat() if prop.updated_at else generated
        _url(urlset, f"{site_url}/imovel/{prop.slug}", lastmod, "weekly", "0.8")
        if prop.address_city:
            neighborhoods = cities.setdefault(prop.address_city, [])
            if prop.address_neighborhood and prop.address_neighborhood not in neighborhoods:
                neighborhoods.append(prop.address_neighborhood)

    for city, neighborhoods in cities.items():
        location = f"{site_url}/imoveis/localizacao?city={quote(city)}"
        _url(urlset, location, generated, "daily", "0.8")
        for neighborhood in neighborhoods:
            _url(urlset, f"{location}&bairro={quote(neighborhood)}", generated, "weekly", "0.7")
        for kind in PropertyType:
            _url(urlset, f"{location}&tipo={kind.value}", generated, "weekly", "0.6")

    body = ET.tostring(urlset, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}'


# ============================================================
# Open Graph share page
# ============================================================


def share_title(prop: Property) -> str:
    location = (
        f"{prop.address_neighborhood}, {prop.address_city}"
        if prop.address_neighborhood
        else prop.address_city
    )
    return f"{type_label(prop.type)} em {location} – {format_brl(prop.price)}"


def share_description(prop: Property) -> str:
    parts = []
    if prop.bedrooms > 0:
        parts.append(plural(prop.bedrooms, "quarto"))
    if prop.bathrooms > 0:
        parts.append(plural(prop.bathrooms, "banheiro"))
    if prop.garages > 0:
        parts.append(plural(prop.garages, "vaga"))
    if prop.area > 0:
        parts.append(f"{format_number(prop.area)}m²")
    return ", ".join(parts) + ". Clique para ver fotos e detalhes."


def share_page_html(
    prop: Property,
    property_url: str,
    image_url: str,
    site_name: str,
) -> str:
    """Static page carrying Open Graph and Twitter card tags for a listing.

    Browsers are sent on to ``property_url`` after a short delay; crawlers
    only read the meta tags.
    """
    title = html.escape(share_title(prop))
    description = html.escape(share_description(prop))
    url = html.escape(property_url)
    image = html.escape(image_url)
    alt = html.escape(prop.title)
    name = html.escape(site_name)

    return f"""<!DOCTYPE html>
<html lang="pt-BR">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <meta name="title" content="{title}">
  <meta name="description" content="{description}">
  <meta property="og:type" content="website">
  <meta property="og:site_name" content="{name}">
  <meta property="og:url" content="{url}">
  <meta property="og:title" content="{title}">
  <meta property="og:description" content="{description}">
  <meta property="og:image" content="{image}">
  <meta property="og:image:secure_url" content="{image}">
  <meta property="og:image:width" content="1200">
  <meta property="og:image:height" content="630">
  <meta property="og:image:alt" content="{alt}">
  <meta name="twitter:card" content="summary_large_image">
  <meta name="twitter:url" content="{url}">
  <meta name="twitter:title" content="{title}">
  <meta name="twitter:description" content="{description}">
  <meta name="twitter:image" content="{image}">
  <meta http-equiv="refresh" content="{SHARE_REDIRECT_SECONDS};url={url}">
</head>
<body>
  <h1>{title}</h1>
  <p>{description}</p>
  <a href="{url}">Ver imóvel</a>
</body>
</html>
"""
