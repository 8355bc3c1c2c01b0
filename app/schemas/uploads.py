"""
Schemas for admin upload ingestion, batch listing and error detail endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UploadIngestResponse(BaseModel):
    ok: bool
    batch_id: UUID
    kind: str
    status: str
    row_count: int
    error_count: int
    correlation_id: str
    error: str | None = None


class UploadBatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    kind: str
    original_filename: str | None = None
    uploaded_by_subject: str
    uploaded_by_email: str | None = None
    uploaded_at: datetime
    status: str
    row_count: int
    error_count: int
    finalized_at: datetime | None = None


class UploadBatchListResponse(BaseModel):
    ok: bool = True
    batches: list[UploadBatchResponse] = Field(default_factory=list)
    viewer: str


class UploadErrorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    row_number: int | None = None
    message: str
    row_json: dict[str, Any] | None = None


class UploadErrorListResponse(BaseModel):
    ok: bool = True
    batch_id: UUID
    errors: list[UploadErrorResponse] = Field(default_factory=list)
