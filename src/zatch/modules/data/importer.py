"""Property import from the export layout.

Rows are matched to existing listings by ``referencia`` when one is given,
otherwise a new listing is created. A bad row is reported with its line
number and the import carries on with the next one.
"""

import re
from typing import Any
from uuid import UUID

import structlog
from pydantic import ValidationError as PydanticValidationError

from zatch.core.errors import AppException
from zatch.core.utils.text import strip_accents
from zatch.modules.data.exporter import IMAGES_COLUMN
from zatch.modules.data.schemas import ImportReport, ImportRowError
from zatch.modules.properties.models import PropertyStatus, PropertyType
from zatch.modules.properties.schemas import PropertyCreate, PropertyImageIn, PropertyUpdate
from zatch.modules.properties.services import PropertyService


logger = structlog.get_logger()

TYPE_ALIASES: dict[str, str] = {
    "chacara": PropertyType.RURAL.value,
    "fazenda": PropertyType.RURAL.value,
    "sitio": PropertyType.RURAL.value,
    "loja": PropertyType.COMERCIAL.value,
    "sala": PropertyType.COMERCIAL.value,
    "imovel comercial": PropertyType.COMERCIAL.value,
    "imovel rural": PropertyType.RURAL.value,
}

TRUE_VALUES = frozenset({"sim", "s", "yes", "y", "true", "1", "x", "destaque"})

# CSV column -> Property field, for plain text columns
TEXT_COLUMNS = {
    "descricao": "description",
    "endereco_rua": "address_street",
    "endereco_bairro": "address_neighborhood",
    "endereco_cidade": "address_city",
    "endereco_estado": "address_state",
    "endereco_cep": "address_zipcode",
    "referencia": "reference",
    "seo_titulo": "seo_title",
    "seo_descricao": "seo_description",
}
INT_COLUMNS = {
    "quartos": "bedrooms",
    "suites": "suites",
    "banheiros": "bathrooms",
    "vagas": "garages",
}
NUMBER_COLUMNS = {
    "latitude": "address_lat",
    "longitude": "address_lng",
    "area_total": "area",
    "area_construida": "built_area",
}
PRICE_COLUMNS = {
    "preco": "price",
    "condominio": "condo_fee",
    "iptu": "iptu",
}
BOOL_COLUMNS = {
    "aceita_financiamento": "financing",
    "condominio_isento": "condo_exempt",
    "destaque": "featured",
    "ativo": "active",
}
LIST_COLUMNS = {
    "caracteristicas": "features",
    "amenidades": "amenities",
}
# Free text kept byte for byte
UNTRIMMED_COLUMNS = frozenset({"descricao"})


def parse_price(value: str | None) -> float | None:
    """Parse a price written the Brazilian or the plain way.

    Examples:
        >>> parse_price("R$ 1.350.000,00")
        1350000.0
        >>> parse_price("1350000.50")
        1350000.5
        >>> parse_price("1.350.000")
        1350000.0
    """
    if not value:
        return None
    cleaned = re.sub(r"R\$|\s", "", value)
    if not cleaned:
        return None

    has_dot, has_comma = "." in cleaned, "," in cleaned
    if has_dot and has_comma:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    elif has_comma:
        cleaned = cleaned.replace(",", ".")
    elif cleaned.count(".") > 1:
        cleaned = cleaned.replace(".", "")

    cleaned = re.sub(r"[^\d.]", "", cleaned)
    try:
        number = float(cleaned)
    except ValueError:
        return None
    return number if number >= 0 else None


def parse_int(value: str | None) -> int:
    digits = re.sub(r"\D", "", value or "")
    return int(digits) if digits else 0


def parse_number(value: str | None) -> float | None:
    if not value:
        return None
    cleaned = re.sub(r"[^\d.,-]", "", value).replace(",", ".")
    try:
        return float(cleaned)
    except ValueError:
        return None


def parse_bool(value: str | None) -> bool:
    return strip_accents((value or "").strip().lower()) in TRUE_VALUES


def parse_list(value: str | None) -> list[str]:
    return [item.strip() for item in (value or "").split(";") if item.strip()]


def _label_key(value: str) -> str:
    return strip_accents(value.strip().lower())


def map_type(value: str | None) -> str:
    """Map a type label such as ``Galpão`` or ``Chácara`` to a property type."""
    key = _label_key(value or "")
    if key in PropertyType._value2member_map_:
        return key
    return TYPE_ALIASES.get(key, PropertyType.CASA.value)


def map_status(value: str | None) -> str:
    key = _label_key(value or "")
    if key in PropertyStatus._value2member_map_:
        return key
    return PropertyStatus.VENDA.value


def row_to_values(row: dict[str, str]) -> dict[str, Any]:
    """Translate one CSV row into property field values.

    Only columns present in the row are returned, so an update never wipes
    a field the file does not carry.

    Raises:
        ValueError: If the row has no title
    """
    row = {
        key: value if key in UNTRIMMED_COLUMNS else value.strip()
        for key, value in row.items()
    }
    title = row.get("titulo", "")
    if not title:
        raise ValueError("Missing title (titulo)")

    values: dict[str, Any] = {"title": title}
    if row.get("slug"):
        values["slug"] = row["slug"]
    if "tipo" in row:
        values["type"] = map_type(row["tipo"])
    if "finalidade" in row:
        values["status"] = map_status(row["finalidade"])
    if row.get("perfil"):
        values["profile"] = _label_key(row["perfil"])
    if row.get("documentacao"):
        values["documentation"] = _label_key(row["documentacao"])

    for column, field in TEXT_COLUMNS.items():
        if column in row:
            values[field] = row[column] if row[column].strip() else None
    for column, field in INT_COLUMNS.items():
        if column in row:
            values[field] = parse_int(row[column])
    for column, field in NUMBER_COLUMNS.items():
        if column in row:
            values[field] = parse_number(row[column])
    for column, field in PRICE_COLUMNS.items():
        if row.get(column):
            price = parse_price(row[column])
            if price is not None:
                values[field] = price
    for column, field in BOOL_COLUMNS.items():
        if row.get(column):
            values[field] = parse_bool(row[column])
    for column, field in LIST_COLUMNS.items():
        if column in row:
            values[field] = parse_list(row[column])

    if values.get("address_city") is None and "address_city" in values:
        values["address_city"] = ""
    if values.get("address_state") is None and "address_state" in values:
        values["address_state"] = ""
    if values.get("area") is None and "area" in values:
        values["area"] = 0
    return values


def row_images(row: dict[str, str]) -> list[PropertyImageIn] | None:
    if not row.get(IMAGES_COLUMN, "").strip():
        return None
    return [PropertyImageIn(url=url) for url in parse_list(row[IMAGES_COLUMN])]


class PropertyImporter:
    """Imports parsed CSV rows into one tenant's catalogue."""

    def __init__(self, service: PropertyService) -> None:
        self.service = service

    async def import_rows(self, tenant_id: UUID, rows: list[dict[str, str]]) -> ImportReport:
        report = ImportReport(total=len(rows))
        repo = self.service.repo(tenant_id)

        # Line 1 is the header
        for line, row in enumerate(rows, start=2):
            try:
                values = row_to_values(row)
                images = row_images(row)
                reference = values.get("reference")
                existing = await repo.get_by_reference(reference) if reference else None

                if existing is not None:
                    prop = await self.service.update_property(
                        tenant_id, existing.id, PropertyUpdate(**values)
                    )
                    report.updated += 1
                else:
                    prop = await self.service.create_property(tenant_id, PropertyCreate(**values))
                    report.created += 1

                if images is not None:
                    await self.service.replace_images(tenant_id, prop.id, images)
            except (ValueError, PydanticValidationError, AppException) as exc:
                report.failed += 1
                report.errors.append(ImportRowError(line=line, message=_describe(exc)))

        logger.info(
            "properties_imported",
            tenant_id=str(tenant_id),
            total=report.total,
            created=report.created,
            updated=report.updated,
            failed=report.failed,
        )
        return report


def _describe(exc: Exception) -> str:
    if isinstance(exc, PydanticValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
    if isinstance(exc, AppException):
        return exc.message
    return str(exc)
