"""
app/auth package marker.
"""

from app.auth.identity import (
    DEV_UPLOADER,
    ForbiddenError,
    IdentityError,
    ensure_admin,
    is_admin,
    verify_bearer_token,
)

__all__ = [
    "DEV_UPLOADER",
    "ForbiddenError",
    "IdentityError",
    "ensure_admin",
    "is_admin",
    "verify_bearer_token",
]
