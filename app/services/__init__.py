"""
app/services package marker.
"""

from app.services.audit_service import AuditRecorder
from app.services.dimension_upsert import AccountUpserter
from app.services.upload_ingestion_service import (
    CSVFormatError,
    UploadIngestionService,
    get_upload_ingestion_service,
    read_csv_records,
)

__all__ = [
    "AccountUpserter",
    "AuditRecorder",
    "CSVFormatError",
    "UploadIngestionService",
    "get_upload_ingestion_service",
    "read_csv_records",
]
