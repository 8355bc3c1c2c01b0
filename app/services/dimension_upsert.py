"""
app/services/dimension_upsert.py

Idempotent registration of account natural keys discovered while mapping rows.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from app.repositories.account_repository import AccountRepository

logger = logging.getLogger(__name__)


class AccountUpserter:
    """
    Create-if-absent writer for the account dimension, scoped to one batch.

    Keys already handled by this instance are not sent to the database again.
    Blank keys are ignored. New keys are inserted in sorted order, so two
    transactions touching overlapping keys wait on each other instead of
    deadlocking.
    """

    def __init__(self, db: Session, *, batch_size: int = 500) -> None:
        self._repository = AccountRepository(db)
        self._batch_size = max(1, batch_size)
        self._seen: set[str] = set()

    @property
    def seen_keys(self) -> frozenset[str]:
        return frozenset(self._seen)

    def upsert(self, external_keys: Iterable[str]) -> int:
        """
        Register every unseen key and return the number of accounts newly created.
        """

        pending: list[str] = []
        for raw_key in external_keys:
            key = (raw_key or "").strip()
            if not key or key in self._seen:
                continue
            self._seen.add(key)
            pending.append(key)

        if not pending:
            return 0

        pending.sort()
        created = self._repository.insert_missing(pending, batch_size=self._batch_size)
        logger.debug(
            "Account upsert keys=%d created=%d",
            len(pending),
            created,
        )
        return created
