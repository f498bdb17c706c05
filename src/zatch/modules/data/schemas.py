"""Pydantic schemas for imports and exports."""

from enum import StrEnum

from pydantic import BaseModel


class ExportFormat(StrEnum):
    CSV = "csv"
    JSON = "json"


class ImportRowError(BaseModel):
    line: int
    message: str


class ImportReport(BaseModel):
    total: int = 0
    created: int = 0
    updated: int = 0
    failed: int = 0
    errors: list[ImportRowError] = []
