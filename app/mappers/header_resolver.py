"""
app/mappers/header_resolver.py

Resolves a raw, whitespace-noisy header row to canonical field slots.

Matching is exact against normalized, case-folded headers, trying aliases in
priority order; the first alias that matches wins. Fields whose real header
carries a variable suffix resolve by prefix instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Sequence

from app.validators.mapping_validator import MappingErrorDetail, MappingValidator, SchemaMappingError
from app.validators.value_parsers import cell_text, normalize_header


def _match_key(header: str) -> str:
    return normalize_header(header).casefold()


def find_header_index(headers: Sequence[str], aliases: Sequence[str]) -> int | None:
    """
    Return the index of the first header equal to any alias, in alias priority order.
    """

    normalized = [_match_key(header) for header in headers]
    for alias in aliases:
        key = _match_key(alias)
        if key in normalized:
            return normalized.index(key)
    return None


def find_header_index_starts_with(headers: Sequence[str], prefixes: Sequence[str]) -> int | None:
    """
    Return the index of the first header starting with any prefix, in prefix priority order.
    """

    normalized = [_match_key(header) for header in headers]
    for prefix in prefixes:
        key = _match_key(prefix)
        for index, header in enumerate(normalized):
            if header.startswith(key):
                return index
    return None


@dataclass(frozen=True)
class ColumnSpec:
    """
    One logical field an upload kind reads, and the header texts that may carry it.
    """

    field: str
    aliases: tuple[str, ...]
    required: bool = False
    prefix_match: bool = False

    @property
    def label(self) -> str:
        return self.aliases[0] if self.aliases else self.field


@dataclass(frozen=True)
class WeekColumn:
    """A "Week Ending <date>" column of a wide actuals export."""

    index: int
    header: str
    week_end_date: date


@dataclass(frozen=True)
class ResolvedColumns:
    """
    Column positions for one upload. Unresolved optional fields map to None.
    """

    headers: tuple[str, ...]
    indices: dict[str, int | None]
    match_strategies: dict[str, str] = field(default_factory=dict)
    week_columns: tuple[WeekColumn, ...] = ()

    def index_of(self, field_name: str) -> int | None:
        return self.indices.get(field_name)

    def cell(self, row: Sequence[Any], field_name: str) -> str:
        """
        Trimmed text of ``field_name`` in ``row``; empty when unresolved or the row is short.
        """

        index = self.indices.get(field_name)
        if index is None or index >= len(row):
            return ""
        return cell_text(row[index])

    def snapshot(self, row: Sequence[Any]) -> dict[str, str | None]:
        """
        Header → raw value mapping of the whole row, kept for audit and replay.
        """

        return {
            header: (row[index] if index < len(row) else None)
            for index, header in enumerate(self.headers)
        }


class HeaderResolver:
    """
    Resolves the header row for one upload kind and fails fast on missing required columns.
    """

    def __init__(
        self,
        specs: Sequence[ColumnSpec],
        *,
        failure_message: str | None = None,
    ) -> None:
        self._specs = tuple(specs)
        self._failure_message = failure_message
        self._validator = MappingValidator(
            required_fields=[spec.field for spec in self._specs if spec.required],
            labels={spec.field: spec.label for spec in self._specs},
        )

    @property
    def specs(self) -> tuple[ColumnSpec, ...]:
        return self._specs

    def resolve(self, raw_headers: Sequence[Any]) -> ResolvedColumns:
        headers = tuple(normalize_header(header) for header in raw_headers)
        if not any(headers):
            raise SchemaMappingError(
                message="CSV header row is empty.",
                errors=[
                    MappingErrorDetail(
                        code="empty_headers",
                        message="No CSV headers were provided.",
                    )
                ],
            )

        indices: dict[str, int | None] = {}
        strategies: dict[str, str] = {}
        for spec in self._specs:
            if spec.prefix_match:
                index = find_header_index_starts_with(headers, spec.aliases)
                strategy = "prefix"
            else:
                index = find_header_index(headers, spec.aliases)
                strategy = "exact_or_alias"
            indices[spec.field] = index
            if index is not None:
                strategies[spec.field] = strategy

        self._validator.validate(
            mapping=indices,
            source_headers=headers,
            summary=self._failure_message,
        )

        return ResolvedColumns(
            headers=headers,
            indices=indices,
            match_strategies=strategies,
        )
