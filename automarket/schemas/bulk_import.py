from typing import Any
from pydantic import BaseModel, Field
from automarket.models.bulk_import import BulkImportStatus


class BulkImportRequest(BaseModel):
    cars: list[dict[str, Any]] = Field(min_length=1)


class BulkImportItemResult(BaseModel):
    index: int
    success: bool
    car_id: int | None = None
    error: str | None = None


class BulkImportResult(BaseModel):
    job_id: int
    status: BulkImportStatus
    total: int
    imported: int
    failed: int
    results: list[BulkImportItemResult]
