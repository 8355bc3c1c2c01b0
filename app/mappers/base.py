"""
app/mappers/base.py

Abstract base class for per-kind row mappers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Sequence

from app.domain.uploads import RowMapResult
from app.mappers.header_resolver import ColumnSpec, HeaderResolver, ResolvedColumns


class BaseRowMapper(ABC):
    """
    Contract for turning the rows of one upload kind into fact inputs.

    A mapper resolves the header row once, then maps each data row into a
    RowMapResult. Mapping is pure: no I/O, no logging, no database access.
    Row-level problems are returned as errors, never raised; a row with no
    usable discriminating fields maps to an empty result and is skipped.
    """

    column_specs: ClassVar[tuple[ColumnSpec, ...]] = ()
    missing_columns_message: ClassVar[str | None] = None

    def __init__(self) -> None:
        self._header_resolver = HeaderResolver(
            self.column_specs,
            failure_message=self.missing_columns_message,
        )

    def resolve_columns(self, headers: Sequence[Any]) -> ResolvedColumns:
        """
        Resolve the header row. Raises SchemaMappingError when a required column is absent.
        """

        return self._header_resolver.resolve(headers)

    @abstractmethod
    def map_row(
        self,
        row: Sequence[Any],
        columns: ResolvedColumns,
        *,
        row_number: int,
    ) -> RowMapResult:
        """
        Map one raw data row.

        Parameters
        ----------
        row:
            Raw cell values in header order; may be shorter or longer than the header.
        columns:
            Output of :meth:`resolve_columns` for this upload.
        row_number:
            1-based CSV record number (the header is record 1), used in errors.
        """
