"""
app/schemas package marker.
"""

from app.schemas.uploads import (
    UploadBatchListResponse,
    UploadBatchResponse,
    UploadErrorListResponse,
    UploadErrorResponse,
    UploadIngestResponse,
)

__all__ = [
    "UploadBatchListResponse",
    "UploadBatchResponse",
    "UploadErrorListResponse",
    "UploadErrorResponse",
    "UploadIngestResponse",
]
