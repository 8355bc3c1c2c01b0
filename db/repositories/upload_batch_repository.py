"""
Repository for upload batch lifecycle persistence, error rows and status lookup.

The caller controls commit/rollback; this repository never commits on its own.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime, timezone

from sqlalchemy import Select, func, insert, select
from sqlalchemy.orm import Session

from db.models.upload_batch import UploadBatch, UploadBatchStatus, UploadError
from db.repositories.errors import BatchNotFoundError, BatchStateError
from db.repositories.types import UploadErrorCreate

_DEFAULT_BATCH_SIZE = 1000


class UploadBatchRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_batch(
        self,
        *,
        kind: str,
        uploaded_by_subject: str,
        uploaded_by_email: str | None = None,
        original_filename: str | None = None,
    ) -> UploadBatch:
        batch = UploadBatch(
            kind=kind,
            original_filename=original_filename,
            uploaded_by_subject=uploaded_by_subject,
            uploaded_by_email=uploaded_by_email,
            status=UploadBatchStatus.PROCESSING,
            row_count=0,
            error_count=0,
        )
        self._session.add(batch)
        self._session.flush()
        return batch

    def get_batch(self, batch_id: uuid.UUID) -> UploadBatch | None:
        return self._session.get(UploadBatch, batch_id)

    def list_recent(self, *, limit: int = 50) -> list[UploadBatch]:
        stmt: Select[tuple[UploadBatch]] = (
            select(UploadBatch).order_by(UploadBatch.uploaded_at.desc()).limit(max(1, limit))
        )
        return list(self._session.scalars(stmt).all())

    def mark_processed(
        self,
        *,
        batch_id: uuid.UUID,
        row_count: int,
        error_count: int,
    ) -> UploadBatch:
        batch = self._get_processing_batch(batch_id)
        batch.status = UploadBatchStatus.PROCESSED
        batch.row_count = row_count
        batch.error_count = error_count
        batch.finalized_at = datetime.now(timezone.utc)
        self._session.flush()
        return batch

    def mark_failed(self, *, batch_id: uuid.UUID) -> UploadBatch:
        batch = self._get_processing_batch(batch_id)
        batch.status = UploadBatchStatus.FAILED
        batch.row_count = 0
        batch.error_count = 0
        batch.finalized_at = datetime.now(timezone.utc)
        self._session.flush()
        return batch

    def add_errors(
        self,
        *,
        batch_id: uuid.UUID,
        errors: Sequence[UploadErrorCreate],
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> int:
        """
        Append error rows, numbering them after any already recorded for the batch.
        """

        if not errors:
            return 0

        start = self._next_position(batch_id)
        payloads = [
            {
                "id": uuid.uuid4(),
                "batch_id": batch_id,
                "position": start + offset,
                "row_number": error.row_number,
                "message": error.message,
                "row_json": error.row_json,
            }
            for offset, error in enumerate(errors)
        ]
        size = max(1, batch_size)
        for chunk_start in range(0, len(payloads), size):
            self._session.execute(insert(UploadError), payloads[chunk_start : chunk_start + size])
        return len(payloads)

    def list_errors(self, batch_id: uuid.UUID) -> list[UploadError]:
        stmt = (
            select(UploadError)
            .where(UploadError.batch_id == batch_id)
            .order_by(UploadError.position)
        )
        return list(self._session.scalars(stmt).all())

    def _next_position(self, batch_id: uuid.UUID) -> int:
        stmt = select(func.max(UploadError.position)).where(UploadError.batch_id == batch_id)
        current = self._session.scalar(stmt)
        return 0 if current is None else current + 1

    def _get_processing_batch(self, batch_id: uuid.UUID) -> UploadBatch:
        batch = self.get_batch(batch_id)
        if batch is None:
            raise BatchNotFoundError(f"Upload batch not found: {batch_id}")
        if batch.status in UploadBatchStatus.TERMINAL:
            raise BatchStateError(
                f"Upload batch {batch_id} is already {batch.status}; terminal batches are never re-entered."
            )
        return batch
