"""
Repository-layer exceptions for upload batch flows.
"""

from __future__ import annotations


class UploadRepositoryError(Exception):
    """Base exception for upload repository failures."""


class BatchNotFoundError(UploadRepositoryError):
    """Raised when a referenced upload batch does not exist."""


class BatchStateError(UploadRepositoryError):
    """Raised when a batch transition is attempted from a terminal state."""
