"""Portal feed builders.

Three layouts are supported: the ``<Carga>`` XML most Brazilian portals
import, a JSON document and a flat CSV. All of them apply the same feed
options: photo limit, HTML stripping and "price on request" for listings
without a price.
"""

import html
import json
import re
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any
from xml.etree import ElementTree as ET

from zatch.modules.data.csv_codec import write_csv
from zatch.modules.portals.models import FeedFormat
from zatch.modules.portals.schemas import FeedConfig, FeedFilters
from zatch.modules.properties.models import Property, PropertyStatus


FEED_TYPE_LABELS = {
    "casa": "Casa",
    "apartamento": "Apartamento",
    "terreno": "Terreno",
    "comercial": "Comercial",
    "rural": "Rural",
    "cobertura": "Cobertura",
    "flat": "Flat",
    "galpao": "Galpão",
    "loft": "Loft",
}

PROFILE_LABELS = {
    "residencial": "Residencial",
    "comercial": "Comercial",
    "industrial": "Industrial",
    "misto": "Misto",
}

CSV_FEED_COLUMNS = [
    "codigo", "titulo", "tipo", "categoria", "preco", "descricao",
    "quartos", "suites", "banheiros", "vagas", "area", "area_construida",
    "logradouro", "bairro", "cidade", "estado", "cep", "destaque", "url", "fotos",
]

PRICE_ON_REQUEST = "Consulte"

_BREAK_RE = re.compile(r"<br\s*/?>|</p>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")

MEDIA_TYPES = {
    FeedFormat.XML: "application/xml; charset=utf-8",
    FeedFormat.JSON: "application/json; charset=utf-8",
    FeedFormat.CSV: "text/csv; charset=utf-8",
}


def strip_feed_html(value: str) -> str:
    """Drop markup, keeping line breaks where ``<br>`` and ``</p>`` were."""
    text = html.unescape(_TAG_RE.sub("", _BREAK_RE.sub("\n", value)))
    return text.replace("\xa0", " ").strip()


def select_properties(properties: Iterable[Property], filters: FeedFilters) -> list[Property]:
    """Apply a portal's listing filters."""
    selected = []
    for prop in properties:
        if filters.apenas_ativos and not prop.active:
            continue
        if filters.apenas_venda and prop.status != PropertyStatus.VENDA:
            continue
        if filters.apenas_aluguel and prop.status != PropertyStatus.ALUGUEL:
            continue
        if filters.apenas_destaques and not prop.featured:
            continue
        if filters.excluir_sem_fotos and not prop.images:
            continue
        if filters.excluir_sem_endereco and not (prop.address_city and prop.address_state):
            continue
        selected.append(prop)
    return selected


def _number(value: float | None) -> int | float | None:
    if value is None:
        return None
    return int(value) if float(value).is_integer() else value


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _code(prop: Property) -> str:
    return prop.reference or str(prop.id)


def _description(prop: Property, config: FeedConfig) -> str:
    if config.remover_html and prop.description:
        return strip_feed_html(prop.description)
    return prop.description or ""


def _price(prop: Property, config: FeedConfig) -> int | float | str | None:
    if prop.price > 0:
        return _number(prop.price)
    return PRICE_ON_REQUEST if config.preco_consulte else None


def _photos(prop: Property, config: FeedConfig) -> list[Any]:
    return list(prop.images)[: config.limite_fotos]


def _category(prop: Property) -> str:
    return "Venda" if prop.status == PropertyStatus.VENDA else "Aluguel"


def _details_url(base_url: str, prop: Property) -> str:
    return f"{base_url.rstrip('/')}/imovel/{prop.slug}"


# ============================================================
# XML
# ============================================================


def build_xml_feed(properties: Iterable[Property], config: FeedConfig, base_url: str) -> str:
    root = ET.Element("Carga", {"xmlns:xsi": "http://www.w3.org/2001/XMLSchema-instance"})
    listings = ET.SubElement(root, "Imoveis")

    for prop in properties:
        item = ET.SubElement(listings, "Imovel")

        def field(tag: str, value: Any, parent: ET.Element = item) -> None:
            ET.SubElement(parent, tag).text = _text(value)

        field("CodigoImovel", _code(prop))
        field("TituloImovel", prop.title)
        field("TipoImovel", FEED_TYPE_LABELS.get(prop.type, prop.type))
        field("SubTipoImovel", PROFILE_LABELS.get(prop.profile, prop.profile))
        field("CategoriaImovel", _category(prop))
        price = _price(prop, config)
        if price is not None:
            field("PrecoVenda", price)
        field("Observacao", _description(prop, config))
        field("QtdDormitorios", prop.bedrooms)
        field("QtdSuites", prop.suites)
        field("QtdBanheiros", prop.bathrooms)
        field("QtdVagas", prop.garages)
        field("AreaUtil", _number(prop.area))
        field("AreaTotal", _number(prop.built_area or prop.area))

        address = ET.SubElement(item, "Endereco")
        field("Logradouro", prop.address_street, address)
        field("Bairro", prop.address_neighborhood, address)
        field("Cidade", prop.address_city, address)
        field("UF", prop.address_state, address)
        field("CEP", prop.address_zipcode, address)

        field("Destaque", "Sim" if prop.featured else "Nao")
        field("URLDetalhes", _details_url(base_url, prop))
        for image in _photos(prop, config):
            photos = ET.SubElement(item, "Fotos")
            field("URLArquivo", image.url, photos)

    ET.indent(root)
    body = ET.tostring(root, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}'


# ============================================================
# JSON
# ============================================================


def build_json_feed(
    properties: Iterable[Property],
    config: FeedConfig,
    base_url: str,
    now: datetime | None = None,
) -> str:
    items = [
        {
            "id": _code(prop),
            "title": prop.title,
            "type": FEED_TYPE_LABELS.get(prop.type, prop.type),
            "profile": PROFILE_LABELS.get(prop.profile, prop.profile),
            "status": "sale" if prop.status == PropertyStatus.VENDA else "rent",
            "price": _price(prop, config),
            "description": _description(prop, config) or None,
            "bedrooms": prop.bedrooms,
            "suites": prop.suites,
            "bathrooms": prop.bathrooms,
            "parking": prop.garages,
            "area": _number(prop.area),
            "built_area": _number(prop.built_area),
            "featured": prop.featured,
            "address": {
                "street": prop.address_street,
                "neighborhood": prop.address_neighborhood,
                "city": prop.address_city,
                "state": prop.address_state,
                "zipcode": prop.address_zipcode,
            },
            "url": _details_url(base_url, prop),
            "images": [{"url": image.url, "alt": image.alt} for image in _photos(prop, config)],
        }
        for prop in properties
    ]
    document = {
        "total": len(items),
        "updated_at": (now or datetime.now(UTC)).isoformat(),
        "properties": items,
    }
    return json.dumps(document, ensure_ascii=False)


# ============================================================
# CSV
# ============================================================


def build_csv_feed(properties: Iterable[Property], config: FeedConfig, base_url: str) -> str:
    rows = [
        {
            "codigo": _code(prop),
            "titulo": prop.title,
            "tipo": FEED_TYPE_LABELS.get(prop.type, prop.type),
            "categoria": _category(prop),
            "preco": _price(prop, config),
            "descricao": _description(prop, config),
            "quartos": prop.bedrooms,
            "suites": prop.suites,
            "banheiros": prop.bathrooms,
            "vagas": prop.garages,
            "area": _number(prop.area),
            "area_construida": _number(prop.built_area),
            "logradouro": prop.address_street,
            "bairro": prop.address_neighborhood,
            "cidade": prop.address_city,
            "estado": prop.address_state,
            "cep": prop.address_zipcode,
            "destaque": "Sim" if prop.featured else "Nao",
            "url": _details_url(base_url, prop),
            "fotos": "|".join(image.url for image in _photos(prop, config)),
        }
        for prop in properties
    ]
    return write_csv(CSV_FEED_COLUMNS, rows)


def render_feed(
    feed_format: str,
    properties: Iterable[Property],
    config: FeedConfig,
    base_url: str,
) -> tuple[str, str]:
    """Build a feed body in ``feed_format``.

    Returns:
        Tuple of (body, media type)
    """
    fmt = FeedFormat(feed_format)
    selected = select_properties(properties, config.filtros)
    base = config.dominio_base or base_url
    if fmt is FeedFormat.JSON:
        body = build_json_feed(selected, config, base)
    elif fmt is FeedFormat.CSV:
        body = build_csv_feed(selected, config, base)
    else:
        body = build_xml_feed(selected, config, base)
    return body, MEDIA_TYPES[fmt]
