"""
app/validators/mapping_validator.py

Validation for header-to-field resolution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence


@dataclass(frozen=True)
class MappingErrorDetail:
    """
    Structured mapping error detail.
    """

    code: str
    message: str
    canonical_field: str | None = None
    source_column: str | None = None
    context: dict[str, Any] | None = None


class SchemaMappingError(ValueError):
    """
    Raised when an upload's header row cannot be resolved to the fields its kind requires.
    """

    def __init__(self, *, message: str, errors: Sequence[MappingErrorDetail]) -> None:
        super().__init__(message)
        self.message = message
        self.errors = tuple(errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "errors": [
                {
                    "code": error.code,
                    "message": error.message,
                    "canonical_field": error.canonical_field,
                    "source_column": error.source_column,
                    "context": error.context,
                }
                for error in self.errors
            ],
        }


class MappingValidator:
    """
    Checks that every required field resolved to a header column.
    """

    def __init__(
        self,
        *,
        required_fields: Sequence[str],
        labels: Mapping[str, str] | None = None,
    ) -> None:
        self._required_fields = tuple(required_fields)
        self._labels = dict(labels or {})

    def validate(
        self,
        *,
        mapping: Mapping[str, int | None],
        source_headers: Sequence[str],
        summary: str | None = None,
    ) -> None:
        """
        Raise SchemaMappingError listing every required field left unmapped.

        ``summary`` replaces the default message; it is what the batch records
        as its single batch-level error.
        """

        errors = [
            MappingErrorDetail(
                code="required_field_unmapped",
                message=f"Required column {self._labels.get(required, required)!r} was not found.",
                canonical_field=required,
                context={"source_headers": list(source_headers)},
            )
            for required in self._required_fields
            if mapping.get(required) is None
        ]

        if errors:
            missing = [self._labels.get(error.canonical_field, error.canonical_field) for error in errors]
            message = summary or (
                f"Header validation failed. Missing required columns: {', '.join(missing)}."
            )
            raise SchemaMappingError(message=message, errors=errors)
