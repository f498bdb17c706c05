"""Import and export routes."""

from datetime import UTC, datetime

from fastapi import APIRouter, Query, Request
from fastapi.responses import Response

from zatch.core.errors import BadRequestError
from zatch.core.permissions import require_permission
from zatch.modules.data.csv_codec import read_csv
from zatch.modules.data.exporter import export_csv, export_json
from zatch.modules.data.importer import PropertyImporter
from zatch.modules.data.schemas import ExportFormat, ImportReport
from zatch.modules.properties.services import PropertySvc
from zatch.modules.tenants.context import MemberContext


router = APIRouter(prefix="/data", tags=["data"])


@router.get(
    "/export",
    summary="Export properties",
    description="Download every property as CSV (UTF-8 with BOM) or JSON.",
)
@require_permission("data", "view")
async def export_properties(
    context: MemberContext,
    service: PropertySvc,
    format: ExportFormat = Query(ExportFormat.CSV),  # noqa: A002
    include_inactive: bool = Query(False),
    include_images: bool = Query(True),
) -> Response:
    properties = await service.repo(context.tenant.id).list_all(active_only=not include_inactive)
    stamp = datetime.now(UTC).date().isoformat()

    if format is ExportFormat.JSON:
        body = export_json(properties, include_images)
        media_type = "application/json"
    else:
        body = export_csv(properties, include_images)
        media_type = "text/csv; charset=utf-8"

    return Response(
        body,
        media_type=media_type,
        headers={
            "Content-Disposition": f'attachment; filename="imoveis_export_{stamp}.{format.value}"'
        },
    )


@router.post(
    "/import",
    response_model=ImportReport,
    summary="Import properties from CSV",
    description=(
        "Send the CSV file as the raw request body. Rows with a known "
        "`referencia` update that property; other rows create new ones."
    ),
)
@require_permission("data", "create")
async def import_properties(
    request: Request,
    context: MemberContext,
    service: PropertySvc,
) -> ImportReport:
    raw = await request.body()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise BadRequestError("CSV must be UTF-8 encoded", error_code="invalid_encoding") from exc

    rows = read_csv(text)
    if not rows:
        raise BadRequestError("CSV file has no data rows", error_code="empty_import")

    return await PropertyImporter(service).import_rows(context.tenant.id, rows)
