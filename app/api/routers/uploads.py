"""
app/api/routers/uploads.py

Admin upload HTTP endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Header, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.api.dependencies import ensure_upload_file, read_upload_bytes, require_admin_uploader
from app.config import UploadIngestionSettings, get_upload_ingestion_settings
from app.domain.uploads import Uploader
from app.schemas.uploads import (
    UploadBatchListResponse,
    UploadBatchResponse,
    UploadErrorListResponse,
    UploadErrorResponse,
    UploadIngestResponse,
)
from app.services.upload_ingestion_service import (
    UploadIngestionService,
    get_upload_ingestion_service,
)
from db.models.upload_batch import UploadKind
from db.repositories.errors import BatchNotFoundError
from db.session import get_db

router = APIRouter(prefix="/admin/uploads", tags=["uploads"])


@router.post("", response_model=UploadIngestResponse)
def create_upload(
    kind: str = Form(default=""),
    file: UploadFile | None = File(default=None),
    correlation_id: str | None = Header(default=None, alias="X-Correlation-ID"),
    uploader: Uploader = Depends(require_admin_uploader),
    settings: UploadIngestionSettings = Depends(get_upload_ingestion_settings),
    db: Session = Depends(get_db),
    ingestion_service: UploadIngestionService = Depends(get_upload_ingestion_service),
) -> UploadIngestResponse:
    """
    Ingest one CSV upload and return the batch outcome.

    A batch that ends ``failed`` is still a 200 response with ``ok: false``.
    """

    try:
        try:
            upload_kind = UploadKind.parse(kind)
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid kind",
            ) from exc

        upload_file = ensure_upload_file(file)
        content = read_upload_bytes(upload_file, max_bytes=settings.max_upload_bytes)

        outcome = ingestion_service.ingest_upload(
            db=db,
            kind=upload_kind,
            file_name=upload_file.filename or None,
            content=content,
            uploader=uploader,
            correlation_id=(correlation_id or "").strip() or None,
        )
    finally:
        if file is not None:
            file.file.close()

    return UploadIngestResponse(
        ok=outcome.ok,
        batch_id=outcome.batch_id,
        kind=outcome.kind,
        status=outcome.status,
        row_count=outcome.row_count,
        error_count=outcome.error_count,
        correlation_id=outcome.correlation_id,
        error=outcome.error,
    )


@router.get("", response_model=UploadBatchListResponse)
def list_uploads(
    limit: int | None = Query(default=None, ge=1, le=200, description="Max batches returned, newest first"),
    uploader: Uploader = Depends(require_admin_uploader),
    settings: UploadIngestionSettings = Depends(get_upload_ingestion_settings),
    db: Session = Depends(get_db),
    ingestion_service: UploadIngestionService = Depends(get_upload_ingestion_service),
) -> UploadBatchListResponse:
    batches = ingestion_service.list_batches(db=db, limit=limit or settings.batch_list_limit)
    return UploadBatchListResponse(
        batches=[UploadBatchResponse.model_validate(batch) for batch in batches],
        viewer=uploader.display,
    )


@router.get("/{batch_id}/errors", response_model=UploadErrorListResponse)
def list_upload_errors(
    batch_id: UUID,
    uploader: Uploader = Depends(require_admin_uploader),
    db: Session = Depends(get_db),
    ingestion_service: UploadIngestionService = Depends(get_upload_ingestion_service),
) -> UploadErrorListResponse:
    try:
        errors = ingestion_service.list_errors(db=db, batch_id=batch_id)
    except BatchNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Upload batch not found: {batch_id}",
        ) from exc

    return UploadErrorListResponse(
        batch_id=batch_id,
        errors=[UploadErrorResponse.model_validate(error) for error in errors],
    )
