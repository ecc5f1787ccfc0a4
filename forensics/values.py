"""
Cell-level coercion helpers shared by the classifiers and the pipeline.

Rows arrive from spreadsheet and CSV exports, so a cell is either text, a
number, or absent (``None``/missing key). These helpers keep that three-way
handling in one place.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

from dateutil import parser as date_parser

CellValue = Union[str, int, float, None]
Row = Mapping[str, CellValue]

_LEADING_FLOAT = re.compile(
    r"^\s*[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)
_NUMBER_LIKE = re.compile(r"^[\s\d.,+\-eE]*$")
_DIGIT = re.compile(r"\d")
_DEFAULT_DATE = datetime(1970, 1, 1)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_absent(value: CellValue) -> bool:
    """Absent means no usable content: missing, ``None`` or an empty string."""
    return value is None or value == ""


def parse_number_text(text: str) -> Optional[float]:
    """Parse the leading float of ``text`` after dropping thousands separators."""
    match = _LEADING_FLOAT.match(text.replace(",", ""))
    if not match:
        return None
    token = match.group(0).strip()
    if token.lstrip("+-") == "Infinity":
        return -math.inf if token.startswith("-") else math.inf
    return float(token)


def parse_amount(value: CellValue) -> Optional[float]:
    """Return the finite numeric amount of a cell, or ``None`` when there is none."""
    if value is None:
        return None
    if isinstance(value, str):
        parsed = parse_number_text(value)
    elif is_number(value):
        try:
            parsed = float(value)
        except OverflowError:
            return None
    else:
        return None
    if parsed is None or not math.isfinite(parsed):
        return None
    return parsed


def render_value(value: CellValue) -> str:
    """Stringify a cell the way it reads in the source sheet.

    Integral floats drop their ``.0`` so ``100.0`` and ``100`` render alike.
    """
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)


def canonical_cell(value: CellValue) -> CellValue:
    """Normalize integral floats to ints so equal numbers serialize equally."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def parse_date_text(text: str) -> Optional[datetime]:
    """Parse a calendar date string into an aware UTC datetime.

    Strings made only of digits and number punctuation are amounts, not dates.
    A date needs at least one numeral, so bare month or weekday names such as
    ``"May"`` or ``"Mon"`` are rejected.
    """
    candidate = text.strip()
    if not candidate or _NUMBER_LIKE.match(candidate) or not _DIGIT.search(candidate):
        return None
    try:
        parsed = datetime.fromisoformat(candidate.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = date_parser.parse(candidate, default=_DEFAULT_DATE)
        except (ValueError, OverflowError):
            return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


__all__ = [
    "CellValue",
    "Row",
    "canonical_cell",
    "is_absent",
    "is_number",
    "parse_amount",
    "parse_date_text",
    "parse_number_text",
    "render_value",
]
