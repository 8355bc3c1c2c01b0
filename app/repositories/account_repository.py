"""
app/repositories/account_repository.py

Create-if-absent persistence for the account dimension.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from db.models.account import Account

_DEFAULT_BATCH_SIZE = 500

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class AccountRepository:
    """
    Registers accounts by external key with INSERT ... ON CONFLICT DO NOTHING.

    Concurrent batches referencing the same key never conflict: the second
    writer is a no-op.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def insert_missing(
        self,
        external_keys: Sequence[str],
        *,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> int:
        """
        Create accounts for keys not yet registered; return how many rows were created.
        """

        if not external_keys:
            return 0

        insert = self._insert_for_dialect()
        size = max(1, batch_size)
        created = 0
        for start in range(0, len(external_keys), size):
            chunk = external_keys[start : start + size]
            stmt = (
                insert(Account)
                .values([{"id": uuid.uuid4(), "external_key": key} for key in chunk])
                .on_conflict_do_nothing(index_elements=["external_key"])
                .returning(Account.id)
            )
            created += len(self._session.scalars(stmt).all())
        return created

    def get_by_external_key(self, external_key: str) -> Account | None:
        stmt = select(Account).where(Account.external_key == external_key)
        return self._session.scalars(stmt).first()

    def count(self) -> int:
        return self._session.scalar(select(func.count()).select_from(Account)) or 0

    def _insert_for_dialect(self):
        dialect = self._session.get_bind().dialect.name
        try:
            return _DIALECT_INSERTS[dialect]
        except KeyError:
            raise RuntimeError(f"Account upsert is not supported on dialect {dialect!r}.") from None
