"""
db/models/account.py

Account dimension keyed by the external account/geography text found in source files.
"""

from __future__ import annotations

import uuid

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, CreatedAtMixin


class Account(Base, CreatedAtMixin):
    """
    Natural-key dimension row.

    Uploads only ever create the row by external_key. name and retailer_id are
    filled in later by the admin org workflow.
    """

    __tablename__ = "account"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    external_key: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment='Free-text key as it appears in uploads, e.g. "Publix - Atlanta Division"',
    )
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    retailer_id: Mapped[uuid.UUID | None] = mapped_column(nullable=True)

    __table_args__ = (
        UniqueConstraint("external_key", name="uq_account_external_key"),
    )

    def __repr__(self) -> str:
        return f"<Account id={self.id} external_key={self.external_key!r}>"
