"""
Typed DTOs used by repository flows.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class UploadErrorCreate:
    """
    One error row to append to a batch. row_number None marks a batch-level failure.
    """

    message: str
    row_number: int | None = None
    row_json: dict[str, Any] | None = None


@dataclass(frozen=True)
class AuditEventCreate:
    """
    Append-only audit record payload.
    """

    action: str
    entity_type: str
    source: str
    entity_id: str | None = None
    actor_subject: str | None = None
    actor_email: str | None = None
    correlation_id: str | None = None
    before: dict[str, Any] | None = None
    after: dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None
    event_id: uuid.UUID = field(default_factory=uuid.uuid4)
