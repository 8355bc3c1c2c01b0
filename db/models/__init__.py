"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.account import Account
from db.models.audit_log import AuditLog, AuditSource
from db.models.facts import ActualsWeeklyFact, BudgetRaw, PromotionRaw
from db.models.upload_batch import UploadBatch, UploadBatchStatus, UploadError, UploadKind

__all__ = [
    "Account",
    "ActualsWeeklyFact",
    "AuditLog",
    "AuditSource",
    "BudgetRaw",
    "PromotionRaw",
    "UploadBatch",
    "UploadBatchStatus",
    "UploadError",
    "UploadKind",
]
