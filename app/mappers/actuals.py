"""
app/mappers/actuals.py

Wide weekly actuals mapper.

Expected shape
--------------
Geography, Product, then one column per week headed ``Week Ending MM-DD-YY``.

Each data row is unpivoted: one row × N week columns becomes up to N
(geography, product, week_end_date, volume) facts. Blank cells are skipped;
negative volumes are row errors and are not written. Geography doubles as
the account natural key.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Any, Sequence

from app.domain.uploads import SKIPPED_ROW, ActualsFactInput, RowError, RowMapResult
from app.mappers.base import BaseRowMapper
from app.mappers.header_resolver import ColumnSpec, ResolvedColumns, WeekColumn
from app.validators.mapping_validator import MappingErrorDetail, SchemaMappingError
from app.validators.value_parsers import parse_date_mmddyy, parse_number

WEEK_ENDING_RE = re.compile(r"^Week Ending\s+(\d{1,2}-\d{1,2}-\d{2})$", re.IGNORECASE)

NEGATIVE_VOLUME_MESSAGE = "Negative volume not allowed"


def find_week_columns(headers: Sequence[str]) -> tuple[WeekColumn, ...]:
    """
    Return every ``Week Ending <MM-DD-YY>`` column whose date parses, in header order.
    """

    columns: list[WeekColumn] = []
    for index, header in enumerate(headers):
        match = WEEK_ENDING_RE.match(header)
        if match is None:
            continue
        week_end = parse_date_mmddyy(match.group(1))
        if week_end is not None:
            columns.append(WeekColumn(index=index, header=header, week_end_date=week_end))
    return tuple(columns)


class ActualsWideMapper(BaseRowMapper):
    column_specs = (
        ColumnSpec("geography", ("Geography",), required=True),
        ColumnSpec("product", ("Product",), required=True),
    )
    missing_columns_message = "Actuals CSV must contain Geography and Product columns"

    def resolve_columns(self, headers: Sequence[Any]) -> ResolvedColumns:
        columns = super().resolve_columns(headers)
        week_columns = find_week_columns(columns.headers)
        if not week_columns:
            raise SchemaMappingError(
                message='Actuals CSV must contain columns like "Week Ending 01-07-24"',
                errors=[
                    MappingErrorDetail(
                        code="required_field_unmapped",
                        message="No parsable 'Week Ending MM-DD-YY' column was found.",
                        canonical_field="week_ending",
                        context={"source_headers": list(columns.headers)},
                    )
                ],
            )
        return replace(columns, week_columns=week_columns)

    def map_row(
        self,
        row: Sequence[Any],
        columns: ResolvedColumns,
        *,
        row_number: int,
    ) -> RowMapResult:
        geography = columns.cell(row, "geography")
        product = columns.cell(row, "product")
        if not geography or not product:
            return SKIPPED_ROW

        facts: list[ActualsFactInput] = []
        errors: list[RowError] = []
        for week in columns.week_columns:
            raw_value = row[week.index] if week.index < len(row) else None
            volume = parse_number(raw_value)
            if volume is None:
                continue

            if volume < 0:
                errors.append(
                    RowError(
                        row_number=row_number,
                        message=f"{NEGATIVE_VOLUME_MESSAGE} (column {week.header!r})",
                        row_json={
                            "geography": geography,
                            "product": product,
                            "column": week.header,
                            "week_end_date": week.week_end_date.isoformat(),
                            "volume": str(volume),
                        },
                    )
                )
                continue

            facts.append(
                ActualsFactInput(
                    geography=geography,
                    product=product,
                    week_end_date=week.week_end_date,
                    volume=volume,
                )
            )

        return RowMapResult(
            facts=tuple(facts),
            dimension_keys=(geography,),
            errors=tuple(errors),
        )
