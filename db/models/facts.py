"""
db/models/facts.py

Canonical fact tables written by upload batches.

Fact rows are immutable once written and always belong to exactly one batch.
Re-uploading a file appends new rows; nothing is replaced.
"""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import Date, ForeignKey, Index, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, CreatedAtMixin, JSONPayload

_AMOUNT = Numeric()


class ActualsWeeklyFact(Base, CreatedAtMixin):
    """One unpivoted (geography, product, week) volume cell from a wide actuals export."""

    __tablename__ = "actuals_weekly_fact"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    batch_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("upload_batch.id", ondelete="CASCADE"),
        nullable=False,
    )
    geography: Mapped[str] = mapped_column(Text, nullable=False)
    product: Mapped[str] = mapped_column(Text, nullable=False)
    week_end_date: Mapped[date] = mapped_column(Date, nullable=False)
    volume: Mapped[Decimal] = mapped_column(_AMOUNT, nullable=False)

    __table_args__ = (
        Index("ix_actuals_weekly_fact_batch_id", "batch_id"),
        Index("ix_actuals_weekly_fact_geo_product_week", "geography", "product", "week_end_date"),
    )


class PromotionRaw(Base, CreatedAtMixin):
    __tablename__ = "promotions_raw"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    batch_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("upload_batch.id", ondelete="CASCADE"),
        nullable=False,
    )
    deal_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    promo_status: Mapped[str | None] = mapped_column(Text, nullable=True)
    promo_type: Mapped[str | None] = mapped_column(Text, nullable=True)
    call_point: Mapped[str | None] = mapped_column(Text, nullable=True)
    ppg: Mapped[str | None] = mapped_column(Text, nullable=True, comment="Product group")
    promo_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    promo_end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    cost_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    cost_end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    scan_back_per_case: Mapped[Decimal | None] = mapped_column(_AMOUNT, nullable=True)
    tr_share_of_discount: Mapped[Decimal | None] = mapped_column(_AMOUNT, nullable=True)
    forecasted_volume: Mapped[Decimal | None] = mapped_column(_AMOUNT, nullable=True)
    geography: Mapped[str | None] = mapped_column(Text, nullable=True)
    route_to_market: Mapped[str | None] = mapped_column(Text, nullable=True)
    row_json: Mapped[dict[str, Any]] = mapped_column(JSONPayload, nullable=False)

    __table_args__ = (
        Index("ix_promotions_raw_batch_id", "batch_id"),
        Index("ix_promotions_raw_deal_id", "deal_id"),
        Index("ix_promotions_raw_call_point", "call_point"),
    )


class BudgetRaw(Base, CreatedAtMixin):
    __tablename__ = "budget_raw"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    batch_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("upload_batch.id", ondelete="CASCADE"),
        nullable=False,
    )
    call_point: Mapped[str] = mapped_column(Text, nullable=False)
    ppg_item: Mapped[str] = mapped_column(Text, nullable=False)
    weeks_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    weekly_volume_per_store: Mapped[Decimal | None] = mapped_column(_AMOUNT, nullable=True)
    total_cases_budgeted: Mapped[Decimal | None] = mapped_column(_AMOUNT, nullable=True)
    tr_share_of_discount: Mapped[Decimal | None] = mapped_column(_AMOUNT, nullable=True)
    scan_back_per_case: Mapped[Decimal | None] = mapped_column(_AMOUNT, nullable=True)
    tr_net_revenue: Mapped[Decimal | None] = mapped_column(_AMOUNT, nullable=True)
    row_json: Mapped[dict[str, Any]] = mapped_column(JSONPayload, nullable=False)

    __table_args__ = (
        Index("ix_budget_raw_batch_id", "batch_id"),
        Index("ix_budget_raw_call_point", "call_point"),
    )
