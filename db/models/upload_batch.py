"""
db/models/upload_batch.py

Upload batch model: one row per ingestion attempt, plus its row-level errors.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, CreatedAtMixin, JSONPayload, utcnow


class UploadKind(str, Enum):
    """The fixed upload shapes an administrator can submit."""

    ACTUALS_WIDE = "actuals_wide"
    PROMOTIONS = "promotions"
    BUDGET = "budget"

    @classmethod
    def parse(cls, raw: str | None) -> "UploadKind":
        normalized = (raw or "").strip().lower()
        for kind in cls:
            if kind.value == normalized:
                return kind
        raise ValueError(f"Invalid kind {raw!r}. Allowed values: {cls.allowed()}.")

    @classmethod
    def allowed(cls) -> str:
        return ", ".join(kind.value for kind in cls)


class UploadBatchStatus:
    """Batch lifecycle: processing → processed | failed. Terminal states are never left."""

    PROCESSING = "processing"
    PROCESSED = "processed"
    FAILED = "failed"

    TERMINAL = frozenset({PROCESSED, FAILED})


class UploadBatch(Base):
    __tablename__ = "upload_batch"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    kind: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="actuals_wide, promotions, budget",
    )
    original_filename: Mapped[str | None] = mapped_column(Text, nullable=True)
    uploaded_by_subject: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Opaque identity of the authenticated uploader",
    )
    uploaded_by_email: Mapped[str | None] = mapped_column(Text, nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=UploadBatchStatus.PROCESSING,
        comment="Pipeline state: processing → processed | failed",
    )
    row_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    error_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    finalized_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    errors: Mapped[list["UploadError"]] = relationship(
        "UploadError",
        back_populates="batch",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="UploadError.position",
    )

    __table_args__ = (
        Index("ix_upload_batch_uploaded_at", "uploaded_at"),
        Index("ix_upload_batch_status", "status"),
        Index("ix_upload_batch_kind", "kind"),
    )

    def __repr__(self) -> str:
        return (
            f"<UploadBatch id={self.id} kind={self.kind!r} status={self.status!r} "
            f"row_count={self.row_count} error_count={self.error_count}>"
        )


class UploadError(Base, CreatedAtMixin):
    """
    One recorded problem for a batch.

    row_number is NULL for a batch-level failure; otherwise it is the 1-based
    CSV record number (the header is record 1). position preserves the order
    errors were recorded in within the batch.
    """

    __tablename__ = "upload_error"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    batch_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("upload_batch.id", ondelete="CASCADE"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    row_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    row_json: Mapped[dict[str, Any] | None] = mapped_column(
        JSONPayload,
        nullable=True,
        comment="Snapshot of the offending row for replay/debugging",
    )

    batch: Mapped[UploadBatch] = relationship("UploadBatch", back_populates="errors")

    __table_args__ = (
        Index("ix_upload_error_batch_id_position", "batch_id", "position"),
    )
