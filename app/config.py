"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _get_list_env(name: str) -> tuple[str, ...]:
    """
    Read a comma separated list; blank entries are dropped.
    """

    raw = _get_optional_str_env(name) or ""
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class UploadIngestionSettings:
    """
    Runtime settings for upload ingestion.
    """

    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    insert_batch_size: int = 1000
    log_row_errors: bool = True
    batch_list_limit: int = 50


@dataclass(frozen=True)
class AuthSettings:
    """
    Bearer token verification and admin allowlists.

    With no jwt_secret configured the service runs in dev mode: any bearer
    token is accepted as the ``dev`` identity, which is always an admin.
    """

    jwt_secret: str | None = None
    jwt_algorithm: str = "HS256"
    jwt_audience: str | None = None
    admin_emails: tuple[str, ...] = ()
    admin_subjects: tuple[str, ...] = ()

    @property
    def dev_mode(self) -> bool:
        return not self.jwt_secret


@lru_cache(maxsize=1)
def get_upload_ingestion_settings() -> UploadIngestionSettings:
    """
    Return cached upload ingestion settings from environment variables.
    """

    return UploadIngestionSettings(
        max_upload_bytes=max(1, _get_int_env("UPLOAD_MAX_BYTES", DEFAULT_MAX_UPLOAD_BYTES)),
        insert_batch_size=max(1, _get_int_env("UPLOAD_INSERT_BATCH_SIZE", 1000)),
        log_row_errors=_get_bool_env("UPLOAD_LOG_ROW_ERRORS", True),
        batch_list_limit=min(200, max(1, _get_int_env("UPLOAD_BATCH_LIST_LIMIT", 50))),
    )


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """
    Return cached auth settings from environment variables.
    """

    return AuthSettings(
        jwt_secret=_get_optional_str_env("AUTH_JWT_SECRET"),
        jwt_algorithm=_get_str_env("AUTH_JWT_ALGORITHM", "HS256"),
        jwt_audience=_get_optional_str_env("AUTH_JWT_AUDIENCE"),
        admin_emails=tuple(email.lower() for email in _get_list_env("ADMIN_EMAILS")),
        admin_subjects=_get_list_env("ADMIN_SUBJECTS"),
    )
