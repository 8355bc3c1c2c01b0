"""
app/services/upload_ingestion_service.py

Service layer for admin CSV uploads.

One call to ``ingest_upload`` takes a batch from creation to a terminal
state:

    1. create the batch in ``processing`` and commit it on its own
    2. decode the CSV and resolve the header row for the batch kind
    3. map every data row into a per-call accumulator (row errors never abort)
    4. upsert referenced accounts, bulk insert facts and row errors
    5. mark the batch ``processed`` and commit steps 2-5 together

Any failure in steps 2-5 rolls the whole unit back; the batch is then marked
``failed`` with exactly one batch-level error in a fresh transaction. One
audit event is appended after either terminal commit.
"""

from __future__ import annotations

import csv
import io
import logging
import uuid
from functools import lru_cache
from typing import Any, Callable

from sqlalchemy.orm import Session

from app.config import get_upload_ingestion_settings
from app.domain.uploads import BatchAccumulator, RowError, Uploader, UploadOutcome
from app.logging_utils import log_event
from app.mappers import get_row_mapper
from app.mappers.base import BaseRowMapper
from app.repositories.fact_repository import FactRepository
from app.services.audit_service import AuditRecorder
from app.services.dimension_upsert import AccountUpserter
from app.validators.mapping_validator import SchemaMappingError
from db.models.upload_batch import UploadBatch, UploadBatchStatus, UploadError, UploadKind
from db.repositories.errors import BatchNotFoundError
from db.repositories.types import UploadErrorCreate
from db.repositories.upload_batch_repository import UploadBatchRepository

logger = logging.getLogger(__name__)

FIRST_DATA_ROW_NUMBER = 2


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CSVFormatError(ValueError):
    """
    Raised when the upload cannot be read as a CSV with at least one data row.
    """


# ---------------------------------------------------------------------------
# CSV reading
# ---------------------------------------------------------------------------


def read_csv_records(content: bytes) -> list[list[str]]:
    """
    Decode upload bytes into CSV records, dropping rows whose cells are all blank.

    The first returned record is the header. Raises CSVFormatError when the
    bytes are not UTF-8, the CSV is malformed, or there is no data row.
    """

    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise CSVFormatError("CSV must be UTF-8 encoded.") from exc

    try:
        reader = csv.reader(io.StringIO(text, newline=""))
        records = [record for record in reader if any(cell.strip() for cell in record)]
    except csv.Error as exc:
        raise CSVFormatError(f"Invalid CSV format: {exc}") from exc

    if len(records) < 2:
        raise CSVFormatError("CSV appears empty")
    return records


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class UploadIngestionService:
    """
    Coordinates batch lifecycle, row mapping, persistence and audit for uploads.
    """

    def __init__(
        self,
        *,
        insert_batch_size: int,
        log_row_errors: bool,
        audit_recorder: AuditRecorder | None = None,
        mapper_factory: Callable[[UploadKind], BaseRowMapper] = get_row_mapper,
    ) -> None:
        self._insert_batch_size = max(1, insert_batch_size)
        self._log_row_errors = log_row_errors
        self._audit_recorder = audit_recorder or AuditRecorder()
        self._mapper_factory = mapper_factory

    def ingest_upload(
        self,
        *,
        db: Session,
        kind: UploadKind,
        file_name: str | None,
        content: bytes,
        uploader: Uploader,
        correlation_id: str | None = None,
    ) -> UploadOutcome:
        """
        Ingest one CSV upload synchronously and return its terminal outcome.

        Args:
            db:              Active SQLAlchemy session. This method commits.
            kind:            Upload kind; selects the row mapper.
            file_name:       Original file name, stored on the batch.
            content:         Raw file bytes, already size-checked by the caller.
            uploader:        Authenticated caller.
            correlation_id:  Reused when given, otherwise generated.
        """
        correlation_id = correlation_id or str(uuid.uuid4())
        batches = UploadBatchRepository(db)

        batch = batches.create_batch(
            kind=kind.value,
            uploaded_by_subject=uploader.subject,
            uploaded_by_email=uploader.email,
            original_filename=file_name,
        )
        batch_id = batch.id
        db.commit()
        log_event(
            logger,
            logging.INFO,
            "upload_batch_created",
            batch_id=batch_id,
            correlation_id=correlation_id,
            kind=kind.value,
            file_name=file_name,
            uploaded_by=uploader.display,
            size_bytes=len(content),
        )

        try:
            outcome = self._process_batch(
                db=db,
                batch_id=batch_id,
                kind=kind,
                content=content,
                correlation_id=correlation_id,
            )
            db.commit()
        except (CSVFormatError, SchemaMappingError) as exc:
            db.rollback()
            message = exc.message if isinstance(exc, SchemaMappingError) else str(exc)
            log_event(
                logger,
                logging.WARNING,
                "upload_header_resolution_failed",
                batch_id=batch_id,
                correlation_id=correlation_id,
                kind=kind.value,
                error=message,
            )
            outcome = self._fail_batch(
                db=db,
                batch_id=batch_id,
                kind=kind,
                correlation_id=correlation_id,
                message=message,
            )
        except Exception as exc:
            db.rollback()
            logger.exception(
                "Upload batch failed unexpectedly batch_id=%s correlation_id=%s",
                batch_id,
                correlation_id,
            )
            outcome = self._fail_batch(
                db=db,
                batch_id=batch_id,
                kind=kind,
                correlation_id=correlation_id,
                message=str(exc) or exc.__class__.__name__,
            )

        log_event(
            logger,
            logging.INFO if outcome.ok else logging.WARNING,
            "upload_batch_finalized",
            batch_id=batch_id,
            correlation_id=correlation_id,
            kind=kind.value,
            status=outcome.status,
            row_count=outcome.row_count,
            error_count=outcome.error_count,
            accounts_created=outcome.accounts_created,
        )
        self._write_audit(db=db, outcome=outcome, uploader=uploader, file_name=file_name)
        return outcome

    def list_batches(self, *, db: Session, limit: int) -> list[UploadBatch]:
        return UploadBatchRepository(db).list_recent(limit=limit)

    def list_errors(self, *, db: Session, batch_id: uuid.UUID) -> list[UploadError]:
        """
        Return a batch's errors in recorded order. Raises BatchNotFoundError for unknown ids.
        """
        repository = UploadBatchRepository(db)
        if repository.get_batch(batch_id) is None:
            raise BatchNotFoundError(f"Upload batch not found: {batch_id}")
        return repository.list_errors(batch_id)

    # ------------------------------------------------------------------
    # Pipeline internals
    # ------------------------------------------------------------------

    def _process_batch(
        self,
        *,
        db: Session,
        batch_id: uuid.UUID,
        kind: UploadKind,
        content: bytes,
        correlation_id: str,
    ) -> UploadOutcome:
        records = read_csv_records(content)
        mapper = self._mapper_factory(kind)
        columns = mapper.resolve_columns(records[0])

        accumulator = BatchAccumulator()
        for row_number, row in enumerate(records[1:], start=FIRST_DATA_ROW_NUMBER):
            result = mapper.map_row(row, columns, row_number=row_number)
            accumulator.add(result)
            for error in result.errors:
                self._log_row_error(batch_id=batch_id, correlation_id=correlation_id, error=error)

        log_event(
            logger,
            logging.INFO,
            "upload_rows_mapped",
            batch_id=batch_id,
            correlation_id=correlation_id,
            rows_seen=accumulator.rows_seen,
            rows_skipped=accumulator.rows_skipped,
            facts=accumulator.row_count,
            errors=accumulator.error_count,
            account_keys=len(accumulator.dimension_keys),
        )

        accounts_created = AccountUpserter(db, batch_size=self._insert_batch_size).upsert(
            accumulator.account_keys
        )
        inserted = FactRepository(db).bulk_insert(
            batch_id=batch_id,
            facts=accumulator.facts,
            batch_size=self._insert_batch_size,
        )
        batches = UploadBatchRepository(db)
        batches.add_errors(
            batch_id=batch_id,
            errors=[_to_error_create(error) for error in accumulator.errors],
            batch_size=self._insert_batch_size,
        )
        batch = batches.mark_processed(
            batch_id=batch_id,
            row_count=accumulator.row_count,
            error_count=accumulator.error_count,
        )
        log_event(
            logger,
            logging.INFO,
            "upload_rows_written",
            batch_id=batch_id,
            correlation_id=correlation_id,
            facts_inserted=inserted,
            accounts_created=accounts_created,
        )

        return UploadOutcome(
            batch_id=batch_id,
            kind=kind.value,
            status=batch.status,
            row_count=batch.row_count,
            error_count=batch.error_count,
            correlation_id=correlation_id,
            accounts_created=accounts_created,
        )

    def _fail_batch(
        self,
        *,
        db: Session,
        batch_id: uuid.UUID,
        kind: UploadKind,
        correlation_id: str,
        message: str,
    ) -> UploadOutcome:
        batches = UploadBatchRepository(db)
        batches.mark_failed(batch_id=batch_id)
        batches.add_errors(
            batch_id=batch_id,
            errors=[UploadErrorCreate(message=message, row_number=None)],
        )
        db.commit()
        return UploadOutcome(
            batch_id=batch_id,
            kind=kind.value,
            status=UploadBatchStatus.FAILED,
            row_count=0,
            error_count=0,
            correlation_id=correlation_id,
            error=message,
        )

    def _write_audit(
        self,
        *,
        db: Session,
        outcome: UploadOutcome,
        uploader: Uploader,
        file_name: str | None,
    ) -> None:
        try:
            audit = self._audit_recorder.record_upload(
                db=db,
                outcome=outcome,
                uploader=uploader,
                file_name=file_name,
            )
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(
                "Failed to write upload audit event batch_id=%s correlation_id=%s",
                outcome.batch_id,
                outcome.correlation_id,
            )
            return

        log_event(
            logger,
            logging.INFO,
            "upload_audit_written",
            batch_id=outcome.batch_id,
            correlation_id=outcome.correlation_id,
            audit_id=audit.id,
        )

    def _log_row_error(
        self,
        *,
        batch_id: uuid.UUID,
        correlation_id: str,
        error: RowError,
    ) -> None:
        if self._log_row_errors:
            logger.warning(
                "Upload row error batch_id=%s correlation_id=%s row=%s message=%s",
                batch_id,
                correlation_id,
                error.row_number,
                error.message,
            )


def _to_error_create(error: RowError) -> UploadErrorCreate:
    row_json: dict[str, Any] | None = dict(error.row_json) if error.row_json is not None else None
    return UploadErrorCreate(message=error.message, row_number=error.row_number, row_json=row_json)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_upload_ingestion_service() -> UploadIngestionService:
    """
    Build and cache the upload ingestion service with env-driven settings.
    """
    settings = get_upload_ingestion_settings()
    return UploadIngestionService(
        insert_batch_size=settings.insert_batch_size,
        log_row_errors=settings.log_row_errors,
    )
