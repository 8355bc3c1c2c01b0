"""
app/services/audit_service.py

Append-only audit trail for upload outcomes.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.domain.uploads import Uploader, UploadOutcome
from db.models.audit_log import AuditLog, AuditSource
from db.repositories.audit_log_repository import AuditLogRepository
from db.repositories.types import AuditEventCreate

UPLOAD_ACTION = "UPLOAD"
UPLOAD_ENTITY_TYPE = "upload_batch"


class AuditRecorder:
    """
    Writes one audit event per finalized batch. The caller owns the transaction.
    """

    def record_upload(
        self,
        *,
        db: Session,
        outcome: UploadOutcome,
        uploader: Uploader,
        file_name: str | None,
    ) -> AuditLog:
        metadata = {
            "kind": outcome.kind,
            "filename": file_name,
            "row_count": outcome.row_count,
            "error_count": outcome.error_count,
            "status": outcome.status,
        }
        if outcome.error is not None:
            metadata["error"] = outcome.error

        event = AuditEventCreate(
            action=UPLOAD_ACTION,
            entity_type=UPLOAD_ENTITY_TYPE,
            entity_id=str(outcome.batch_id),
            source=AuditSource.UPLOAD,
            actor_subject=uploader.subject,
            actor_email=uploader.email,
            correlation_id=outcome.correlation_id,
            metadata=metadata,
        )
        return AuditLogRepository(db).append(event)
