"""
app/mappers/budget.py

Flat mapper for annual budget plan exports.
"""

from __future__ import annotations

from typing import Any, Sequence

from app.domain.uploads import SKIPPED_ROW, BudgetInput, RowMapResult
from app.mappers.aliases import CALL_POINT_ALIASES, TR_SHARE_ALIASES
from app.mappers.base import BaseRowMapper
from app.mappers.header_resolver import ColumnSpec, ResolvedColumns
from app.validators.value_parsers import parse_money, parse_number


class BudgetMapper(BaseRowMapper):
    """One budget line per row; rows without a call point or product group are dropped."""

    column_specs = (
        ColumnSpec("call_point", CALL_POINT_ALIASES, required=True),
        ColumnSpec("ppg_item", ("PPG - Item", "PPG", "Product"), required=True),
        ColumnSpec("weeks_text", ("Weeks",)),
        ColumnSpec("weekly_volume_per_store", ("Weekly Volume (cases per store)", "Weekly Volume")),
        ColumnSpec("total_cases_budgeted", ("Total Cases Budgeted", "Total Cases"), required=True),
        ColumnSpec("tr_share_of_discount", TR_SHARE_ALIASES),
        ColumnSpec("scan_back_per_case", ("Scan Back $ (per case)", "Scan Back")),
        ColumnSpec("tr_net_revenue", ("TR Net Revenue", "Net Revenue")),
    )
    missing_columns_message = (
        "Budget CSV missing required columns (Call Point, PPG - Item, Total Cases Budgeted)"
    )

    def map_row(
        self,
        row: Sequence[Any],
        columns: ResolvedColumns,
        *,
        row_number: int,
    ) -> RowMapResult:
        call_point = columns.cell(row, "call_point")
        ppg_item = columns.cell(row, "ppg_item")
        if not call_point or not ppg_item:
            return SKIPPED_ROW

        fact = BudgetInput(
            call_point=call_point,
            ppg_item=ppg_item,
            weeks_text=columns.cell(row, "weeks_text") or None,
            weekly_volume_per_store=parse_number(columns.cell(row, "weekly_volume_per_store")),
            total_cases_budgeted=parse_number(columns.cell(row, "total_cases_budgeted")),
            tr_share_of_discount=parse_money(columns.cell(row, "tr_share_of_discount")),
            scan_back_per_case=parse_money(columns.cell(row, "scan_back_per_case")),
            tr_net_revenue=parse_money(columns.cell(row, "tr_net_revenue")),
            row_json=columns.snapshot(row),
        )
        return RowMapResult(facts=(fact,), dimension_keys=(call_point,))
