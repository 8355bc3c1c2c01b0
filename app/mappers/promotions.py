"""
app/mappers/promotions.py

Flat mapper for planned/active/ended promotion exports.
"""

from __future__ import annotations

from typing import Any, Sequence

from app.domain.uploads import SKIPPED_ROW, PromotionInput, RowMapResult
from app.mappers.aliases import CALL_POINT_ALIASES, TR_SHARE_ALIASES
from app.mappers.base import BaseRowMapper
from app.mappers.header_resolver import ColumnSpec, ResolvedColumns
from app.validators.value_parsers import parse_date_mdyyyy, parse_money, parse_number


class PromotionsMapper(BaseRowMapper):
    """
    One promotion fact per row.

    Deal ID, Call Point, Promo Status and the product group column are
    required headers; every other field is optional and null when its
    header is absent or its cell does not parse. A row is skipped only when
    Deal ID, Call Point and product group are all empty.
    """

    column_specs = (
        ColumnSpec("deal_id", ("Deal ID", "DealID", "Deal Id"), required=True),
        ColumnSpec("call_point", CALL_POINT_ALIASES, required=True),
        ColumnSpec("promo_status", ("Promo Status", "Status"), required=True),
        ColumnSpec("promo_type", ("Promo Type",), prefix_match=True),
        ColumnSpec("ppg", ("PPG", "PPG - Item", "Product", "PPG Item"), required=True),
        ColumnSpec("cost_start_date", ("Cost Start Date", "Cost Start")),
        ColumnSpec("cost_end_date", ("Cost End Date", "Cost End")),
        ColumnSpec("promo_start_date", ("Promo Start Date", "Promo Start")),
        ColumnSpec("promo_end_date", ("Promo End Date", "Promo End")),
        ColumnSpec("scan_back_per_case", ("Scan Back (per cs)", "Scan Back", "Scan Back $ (per case)")),
        ColumnSpec("tr_share_of_discount", TR_SHARE_ALIASES),
        ColumnSpec("forecasted_volume", ("Forecasted Volume", "Forecast Volume", "Forecast")),
        ColumnSpec("geography", ("Circana Geography", "Geography")),
        ColumnSpec("route_to_market", ("Route to Market", "RTM")),
    )
    missing_columns_message = (
        "Promotions CSV missing required columns (Deal ID, Call Point, Promo Status, PPG)"
    )

    def map_row(
        self,
        row: Sequence[Any],
        columns: ResolvedColumns,
        *,
        row_number: int,
    ) -> RowMapResult:
        deal_id = columns.cell(row, "deal_id")
        call_point = columns.cell(row, "call_point")
        ppg = columns.cell(row, "ppg")
        if not deal_id and not call_point and not ppg:
            return SKIPPED_ROW

        def text(field_name: str) -> str | None:
            return columns.cell(row, field_name) or None

        fact = PromotionInput(
            deal_id=deal_id or None,
            promo_status=text("promo_status"),
            promo_type=text("promo_type"),
            call_point=call_point or None,
            ppg=ppg or None,
            promo_start_date=parse_date_mdyyyy(columns.cell(row, "promo_start_date")),
            promo_end_date=parse_date_mdyyyy(columns.cell(row, "promo_end_date")),
            cost_start_date=parse_date_mdyyyy(columns.cell(row, "cost_start_date")),
            cost_end_date=parse_date_mdyyyy(columns.cell(row, "cost_end_date")),
            scan_back_per_case=parse_money(columns.cell(row, "scan_back_per_case")),
            tr_share_of_discount=parse_money(columns.cell(row, "tr_share_of_discount")),
            forecasted_volume=parse_number(columns.cell(row, "forecasted_volume")),
            geography=text("geography"),
            route_to_market=text("route_to_market"),
            row_json=columns.snapshot(row),
        )
        return RowMapResult(
            facts=(fact,),
            dimension_keys=(call_point,) if call_point else (),
        )
