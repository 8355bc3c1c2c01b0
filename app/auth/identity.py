"""
app/auth/identity.py

Bearer token verification and the admin allowlist check.
"""

from __future__ import annotations

from typing import Any

from jose import JWTError, jwt

from app.config import AuthSettings
from app.domain.uploads import Uploader

DEV_UPLOADER = Uploader(subject="dev", email="dev@local", name="Developer")

_SUBJECT_CLAIMS = ("oid", "sub")
_EMAIL_CLAIMS = ("preferred_username", "upn", "email")


class IdentityError(Exception):
    """
    Raised when a bearer token is missing or cannot be verified.
    """


class ForbiddenError(Exception):
    """
    Raised when a verified caller is not allowed to use admin endpoints.
    """


def _first_claim(claims: dict[str, Any], names: tuple[str, ...]) -> str | None:
    for name in names:
        value = claims.get(name)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def verify_bearer_token(token: str | None, settings: AuthSettings) -> Uploader:
    """
    Resolve the caller identity from a raw bearer token.

    In dev mode any non-empty token maps to DEV_UPLOADER.
    """

    if not token or not token.strip():
        raise IdentityError("Missing Bearer token")
    if settings.dev_mode:
        return DEV_UPLOADER

    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        claims = jwt.decode(
            token.strip(),
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except JWTError as exc:
        raise IdentityError("Invalid token") from exc

    subject = _first_claim(claims, _SUBJECT_CLAIMS)
    if subject is None:
        raise IdentityError("Invalid token")

    email = _first_claim(claims, _EMAIL_CLAIMS)
    return Uploader(
        subject=subject,
        email=email.lower() if email else None,
        name=_first_claim(claims, ("name",)),
    )


def is_admin(uploader: Uploader, settings: AuthSettings) -> bool:
    if uploader.subject == DEV_UPLOADER.subject and settings.dev_mode:
        return True
    if uploader.subject in settings.admin_subjects:
        return True
    return bool(uploader.email) and uploader.email.lower() in settings.admin_emails


def ensure_admin(uploader: Uploader, settings: AuthSettings) -> Uploader:
    if not is_admin(uploader, settings):
        raise ForbiddenError("Forbidden (admin only)")
    return uploader
