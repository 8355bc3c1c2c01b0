"""
Append-only persistence for audit events.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from db.models.audit_log import AuditLog
from db.repositories.types import AuditEventCreate


class AuditLogRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def append(self, event: AuditEventCreate) -> AuditLog:
        row = AuditLog(
            id=event.event_id,
            actor_subject=event.actor_subject,
            actor_email=event.actor_email,
            source=event.source,
            action=event.action,
            entity_type=event.entity_type,
            entity_id=event.entity_id,
            correlation_id=event.correlation_id,
            before=event.before,
            after=event.after,
            metadata_json=event.metadata,
        )
        self._session.add(row)
        self._session.flush()
        return row
