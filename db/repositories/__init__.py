"""
Repository layer exports.
"""

from db.repositories.audit_log_repository import AuditLogRepository
from db.repositories.errors import BatchNotFoundError, BatchStateError, UploadRepositoryError
from db.repositories.types import AuditEventCreate, UploadErrorCreate
from db.repositories.upload_batch_repository import UploadBatchRepository

__all__ = [
    "AuditEventCreate",
    "AuditLogRepository",
    "BatchNotFoundError",
    "BatchStateError",
    "UploadBatchRepository",
    "UploadErrorCreate",
    "UploadRepositoryError",
]
