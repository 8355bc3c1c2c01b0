"""
app/api/dependencies.py

Shared FastAPI dependencies for identity and upload validation.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, UploadFile, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.auth.identity import ForbiddenError, IdentityError, ensure_admin, verify_bearer_token
from app.config import AuthSettings, get_auth_settings
from app.domain.uploads import Uploader

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_uploader(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: AuthSettings = Depends(get_auth_settings),
) -> Uploader:
    """
    Resolve the caller from the Authorization bearer token.
    """

    token = credentials.credentials if credentials is not None else None
    try:
        return verify_bearer_token(token, settings)
    except IdentityError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


def require_admin_uploader(
    uploader: Uploader = Depends(get_current_uploader),
    settings: AuthSettings = Depends(get_auth_settings),
) -> Uploader:
    try:
        return ensure_admin(uploader, settings)
    except ForbiddenError as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc


def ensure_upload_file(file: UploadFile | None) -> UploadFile:
    """
    Validate that a file part was sent. Content is judged by parsing, not by name or MIME type.
    """

    if file is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing file",
        )
    return file


def read_upload_bytes(file: UploadFile, *, max_bytes: int) -> bytes:
    """
    Read the upload body, rejecting anything larger than ``max_bytes`` with 413.
    """

    raw_file = file.file
    raw_file.seek(0)
    content = raw_file.read(max_bytes + 1)
    if len(content) > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large (max {limit_mb:g} MB).",
        )
    return content
