"""
app/validators/value_parsers.py

Cell-level parsing for spreadsheet exports.

Every parser is total: it returns a typed value or None and never raises.
A blank or unusable cell is an absent value, not a row failure.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

BLANK_MARKERS = frozenset({"", "-", "\u2014"})

# Non-breaking and typographic spaces that spreadsheet exports leave in headers.
_ODD_SPACES_RE = re.compile(r"[\u00a0\u2000-\u200b\u202f\u205f\u3000]")
_WHITESPACE_RE = re.compile(r"\s+")
_MONEY_NOISE_RE = re.compile(r"[$,\s]")
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_MMDDYY_RE = re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{2})$")
_MDYYYY_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")

TWO_DIGIT_YEAR_PIVOT = 70

# Cells whose decimal exponent exceeds this are unusable; NUMERIC rejects such magnitudes.
MAX_DECIMAL_EXPONENT = 1000


def cell_text(value: Any) -> str:
    """
    Stringify and trim one raw cell; None becomes the empty string.
    """

    return "" if value is None else str(value).strip()


def normalize_header(header: Any) -> str:
    """
    Collapse every whitespace variant to a single ASCII space and trim.
    """

    text = _ODD_SPACES_RE.sub(" ", "" if header is None else str(header))
    return _WHITESPACE_RE.sub(" ", text).strip()


def _to_decimal(text: str) -> Decimal | None:
    if not _NUMBER_RE.match(text):
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite() or abs(value.adjusted()) > MAX_DECIMAL_EXPONENT:
        return None
    return value


def parse_money(value: Any) -> Decimal | None:
    """
    Parse a currency cell such as ``$1,234.50``.
    """

    text = cell_text(value)
    if text in BLANK_MARKERS:
        return None
    return _to_decimal(_MONEY_NOISE_RE.sub("", text))


def parse_number(value: Any) -> Decimal | None:
    """
    Parse a plain numeric cell such as ``12,500``.
    """

    text = cell_text(value)
    if text in BLANK_MARKERS:
        return None
    return _to_decimal(text.replace(",", ""))


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def parse_date_mmddyy(value: Any) -> date | None:
    """
    Parse ``MM-DD-YY``. Years 70-99 map to 19xx, 00-69 to 20xx.
    """

    match = _MMDDYY_RE.match(cell_text(value))
    if match is None:
        return None
    month, day, yy = (int(part) for part in match.groups())
    year = 1900 + yy if yy >= TWO_DIGIT_YEAR_PIVOT else 2000 + yy
    return _safe_date(year, month, day)


def parse_date_mdyyyy(value: Any) -> date | None:
    """
    Parse ``M/D/YYYY`` (one- or two-digit month and day, four-digit year).
    """

    match = _MDYYYY_RE.match(cell_text(value))
    if match is None:
        return None
    month, day, year = (int(part) for part in match.groups())
    return _safe_date(year, month, day)
