"""
app/domain/uploads.py

Domain models used by the upload ingestion flow.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Union


@dataclass(frozen=True)
class Uploader:
    """
    Authenticated caller submitting an upload.
    """

    subject: str
    email: str | None = None
    name: str | None = None

    @property
    def display(self) -> str:
        return self.email or self.subject


@dataclass(frozen=True)
class RowError:
    """
    One row-level problem. row_number is None for a batch-level failure.
    """

    row_number: int | None
    message: str
    row_json: dict[str, Any] | None = None


@dataclass(frozen=True)
class ActualsFactInput:
    geography: str
    product: str
    week_end_date: date
    volume: Decimal


@dataclass(frozen=True)
class PromotionInput:
    deal_id: str | None
    promo_status: str | None
    promo_type: str | None
    call_point: str | None
    ppg: str | None
    promo_start_date: date | None
    promo_end_date: date | None
    cost_start_date: date | None
    cost_end_date: date | None
    scan_back_per_case: Decimal | None
    tr_share_of_discount: Decimal | None
    forecasted_volume: Decimal | None
    geography: str | None
    route_to_market: str | None
    row_json: dict[str, Any]


@dataclass(frozen=True)
class BudgetInput:
    call_point: str
    ppg_item: str
    weeks_text: str | None
    weekly_volume_per_store: Decimal | None
    total_cases_budgeted: Decimal | None
    tr_share_of_discount: Decimal | None
    scan_back_per_case: Decimal | None
    tr_net_revenue: Decimal | None
    row_json: dict[str, Any]


FactInput = Union[ActualsFactInput, PromotionInput, BudgetInput]


@dataclass(frozen=True)
class RowMapResult:
    """
    What one raw row turned into: zero or more facts, the natural keys they
    reference, and any row-level errors.
    """

    facts: tuple[FactInput, ...] = ()
    dimension_keys: tuple[str, ...] = ()
    errors: tuple[RowError, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.facts or self.dimension_keys or self.errors)


SKIPPED_ROW = RowMapResult()


@dataclass
class BatchAccumulator:
    """
    Unit of work for one batch, built up row by row and flushed once.

    Owned by a single ingest call; never shared between batches.
    """

    facts: list[FactInput] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)
    dimension_keys: dict[str, None] = field(default_factory=dict)
    rows_seen: int = 0
    rows_skipped: int = 0

    def add(self, result: RowMapResult) -> None:
        self.rows_seen += 1
        if result.is_empty:
            self.rows_skipped += 1
            return
        self.facts.extend(result.facts)
        self.errors.extend(result.errors)
        for key in result.dimension_keys:
            self.dimension_keys.setdefault(key, None)

    @property
    def row_count(self) -> int:
        return len(self.facts)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def account_keys(self) -> list[str]:
        return list(self.dimension_keys)


@dataclass(frozen=True)
class UploadOutcome:
    """
    End-of-run result returned to the caller, for processed and failed batches alike.
    """

    batch_id: uuid.UUID
    kind: str
    status: str
    row_count: int
    error_count: int
    correlation_id: str
    error: str | None = None
    accounts_created: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None
