"""Property export in the Portuguese column layout agencies exchange."""

import json
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from zatch.modules.data.csv_codec import write_csv
from zatch.modules.properties.models import Property


EXPORT_COLUMNS = [
    "id",
    "titulo",
    "slug",
    "descricao",
    "tipo",
    "finalidade",
    "perfil",
    "preco",
    "endereco_rua",
    "endereco_bairro",
    "endereco_cidade",
    "endereco_estado",
    "endereco_cep",
    "latitude",
    "longitude",
    "quartos",
    "suites",
    "banheiros",
    "vagas",
    "area_total",
    "area_construida",
    "caracteristicas",
    "amenidades",
    "aceita_financiamento",
    "documentacao",
    "condominio",
    "condominio_isento",
    "iptu",
    "destaque",
    "ativo",
    "referencia",
    "seo_titulo",
    "seo_descricao",
    "criado_em",
    "atualizado_em",
]
IMAGES_COLUMN = "imagens"
LIST_SEPARATOR = "; "


def yes_no(value: bool | None) -> str:
    return "Sim" if value else "Não"


def _number(value: float | None) -> float | int | None:
    if value is None:
        return None
    return int(value) if float(value).is_integer() else value


def _timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def columns(include_images: bool = False) -> list[str]:
    return [*EXPORT_COLUMNS, IMAGES_COLUMN] if include_images else list(EXPORT_COLUMNS)


def property_row(prop: Property, include_images: bool = False) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": str(prop.id),
        "titulo": prop.title,
        "slug": prop.slug,
        "descricao": prop.description or "",
        "tipo": prop.type,
        "finalidade": prop.status,
        "perfil": prop.profile,
        "preco": _number(prop.price),
        "endereco_rua": prop.address_street or "",
        "endereco_bairro": prop.address_neighborhood or "",
        "endereco_cidade": prop.address_city,
        "endereco_estado": prop.address_state,
        "endereco_cep": prop.address_zipcode or "",
        "latitude": prop.address_lat,
        "longitude": prop.address_lng,
        "quartos": prop.bedrooms,
        "suites": prop.suites,
        "banheiros": prop.bathrooms,
        "vagas": prop.garages,
        "area_total": _number(prop.area),
        "area_construida": _number(prop.built_area),
        "caracteristicas": LIST_SEPARATOR.join(prop.features or []),
        "amenidades": LIST_SEPARATOR.join(prop.amenities or []),
        "aceita_financiamento": yes_no(prop.financing),
        "documentacao": prop.documentation,
        "condominio": _number(prop.condo_fee),
        "condominio_isento": yes_no(prop.condo_exempt),
        "iptu": _number(prop.iptu),
        "destaque": yes_no(prop.featured),
        "ativo": yes_no(prop.active),
        "referencia": prop.reference or "",
        "seo_titulo": prop.seo_title or "",
        "seo_descricao": prop.seo_description or "",
        "criado_em": _timestamp(prop.created_at),
        "atualizado_em": _timestamp(prop.updated_at),
    }
    if include_images:
        row[IMAGES_COLUMN] = LIST_SEPARATOR.join(image.url for image in prop.images)
    return row


def export_csv(properties: Iterable[Property], include_images: bool = False) -> str:
    rows = [property_row(prop, include_images) for prop in properties]
    return write_csv(columns(include_images), rows)


def export_json(properties: Iterable[Property], include_images: bool = False) -> str:
    rows = [property_row(prop, include_images) for prop in properties]
    return json.dumps(rows, ensure_ascii=False, indent=2)
