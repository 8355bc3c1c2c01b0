"""
app/repositories/fact_repository.py

Bulk persistence for the canonical fact tables.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import asdict
from typing import Any

from sqlalchemy import insert
from sqlalchemy.orm import Session

from app.domain.uploads import ActualsFactInput, BudgetInput, FactInput, PromotionInput
from db.base import Base
from db.models.facts import ActualsWeeklyFact, BudgetRaw, PromotionRaw

_DEFAULT_BATCH_SIZE = 1000

_MODEL_BY_INPUT: dict[type, type[Base]] = {
    ActualsFactInput: ActualsWeeklyFact,
    PromotionInput: PromotionRaw,
    BudgetInput: BudgetRaw,
}


class FactRepository:
    """
    Writes fact rows for one batch with chunked multi-row INSERTs.

    Rows are appended only: there is no de-duplication against earlier
    batches, so re-uploading a file adds a second copy attributed to the new batch.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def bulk_insert(
        self,
        *,
        batch_id: uuid.UUID,
        facts: Sequence[FactInput],
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> int:
        if not facts:
            return 0

        grouped: dict[type[Base], list[dict[str, Any]]] = {}
        for fact in facts:
            model = _MODEL_BY_INPUT.get(type(fact))
            if model is None:
                raise TypeError(f"Unsupported fact input type: {type(fact).__name__}")
            payload = asdict(fact)
            payload["id"] = uuid.uuid4()
            payload["batch_id"] = batch_id
            grouped.setdefault(model, []).append(payload)

        size = max(1, batch_size)
        inserted = 0
        for model, payloads in grouped.items():
            for start in range(0, len(payloads), size):
                chunk = payloads[start : start + size]
                self._session.execute(insert(model), chunk)
                inserted += len(chunk)
        return inserted
