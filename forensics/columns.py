"""
Column type inference and automatic role selection.

Classification looks at a fixed sample from the top of the dataset so that
large exports can be profiled instantly; role selection then applies header
naming heuristics to the classified columns.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from forensics.models import AnalysisConfig
from forensics.values import CellValue, Row, is_number, parse_date_text, parse_number_text, render_value

TYPE_SAMPLE_SIZE = 10
CATEGORY_SAMPLE_SIZE = 50
MAJORITY_THRESHOLD = 0.5
UNIQUE_RATIO_LIMIT = 0.9
SERIAL_DATE_MIN = 30000
SERIAL_DATE_MAX = 60000

AMOUNT_PATTERN = re.compile(r"(amount|total|value|price|cost|balance|debit|credit)", re.I)
DATE_PATTERN = re.compile(r"(date|time|timestamp|created|posted)", re.I)
CATEGORY_PATTERN = re.compile(r"(vendor|merchant|payee|description|category|type|party)", re.I)
SOURCE_PATTERN = re.compile(r"(employee|approver|user|creator|source|person|agent)", re.I)
INVOICE_PATTERN = re.compile(r"(invoice|ref|id|document|trans|number|ticket)", re.I)

_NON_ZERO_DIGIT = re.compile(r"[1-9]")


@dataclass(frozen=True, slots=True)
class ColumnProfile:
    """Column names per detected class, in header order."""

    numeric: Tuple[str, ...] = ()
    date: Tuple[str, ...] = ()
    category: Tuple[str, ...] = ()
    identifier: Tuple[str, ...] = ()


def headers_of(rows: Sequence[Row]) -> List[str]:
    """Headers are taken from the first row."""
    if not rows:
        return []
    return list(rows[0].keys())


def _majority_columns(rows: Sequence[Row], predicate: Callable[[CellValue], bool]) -> List[str]:
    sample = rows[:TYPE_SAMPLE_SIZE]
    selected: List[str] = []
    for header in headers_of(rows):
        matches = sum(1 for row in sample if predicate(row.get(header)))
        if matches / len(sample) > MAJORITY_THRESHOLD:
            selected.append(header)
    return selected


def _looks_numeric(value: CellValue) -> bool:
    if is_number(value):
        return True
    return isinstance(value, str) and parse_number_text(value) is not None


def _looks_like_date(value: CellValue) -> bool:
    if is_number(value):
        return SERIAL_DATE_MIN <= value <= SERIAL_DATE_MAX
    return isinstance(value, str) and parse_date_text(value) is not None


def _looks_like_identifier(value: CellValue) -> bool:
    if not value:
        return False
    return _NON_ZERO_DIGIT.search(render_value(value)) is not None


def numeric_columns(rows: Sequence[Row]) -> List[str]:
    """Columns whose sampled values mostly parse as numbers."""
    return _majority_columns(rows, _looks_numeric)


def date_columns(rows: Sequence[Row]) -> List[str]:
    """Columns holding spreadsheet date serials or calendar date strings."""
    return _majority_columns(rows, _looks_like_date)


def identifier_columns(rows: Sequence[Row]) -> List[str]:
    """Columns that mostly contain a non-zero digit, even when alphanumeric."""
    return _majority_columns(rows, _looks_like_identifier)


def category_columns(rows: Sequence[Row]) -> List[str]:
    """Columns that are populated but not almost entirely unique."""
    sample = rows[:CATEGORY_SAMPLE_SIZE]
    selected: List[str] = []
    for header in headers_of(rows):
        distinct = set()
        populated = 0
        for row in sample:
            value = row.get(header)
            if isinstance(value, str) or is_number(value):
                distinct.add(value)
                populated += 1
        if populated > 0 and len(distinct) < len(sample) * UNIQUE_RATIO_LIMIT:
            selected.append(header)
    return selected


def classify_columns(rows: Sequence[Row]) -> ColumnProfile:
    return ColumnProfile(
        numeric=tuple(numeric_columns(rows)),
        date=tuple(date_columns(rows)),
        category=tuple(category_columns(rows)),
        identifier=tuple(identifier_columns(rows)),
    )


def _first_match(pattern: re.Pattern[str], candidates: Sequence[str]) -> Optional[str]:
    return next((header for header in candidates if pattern.search(header)), None)


def select_columns(profile: ColumnProfile) -> Optional[AnalysisConfig]:
    """Pick column roles from a classification profile.

    Returns ``None`` when there is no numeric column to analyse.
    """
    if not profile.numeric:
        return None

    amount = _first_match(AMOUNT_PATTERN, profile.numeric) or profile.numeric[-1]

    date = _first_match(DATE_PATTERN, profile.date)
    if date is None and profile.date:
        date = profile.date[0]

    reserved = {amount, date}
    safe_categories = [col for col in profile.category if col not in reserved]
    category = _first_match(CATEGORY_PATTERN, safe_categories)
    if category is None and safe_categories:
        category = safe_categories[0]

    source = _first_match(SOURCE_PATTERN, profile.category)
    if source == category:
        source = None

    safe_ids = [col for col in profile.identifier if col not in reserved]
    invoice = _first_match(INVOICE_PATTERN, safe_ids)
    if invoice is None and safe_ids:
        invoice = safe_ids[0]

    return AnalysisConfig(
        amount_column=amount,
        date_column=date,
        category_column=category,
        source_column=source,
        invoice_column=invoice,
    )


def detect_best_columns(rows: Sequence[Row]) -> Optional[AnalysisConfig]:
    """Classify the dataset and auto-select a role configuration."""
    if not rows:
        return None
    return select_columns(classify_columns(rows))


__all__ = [
    "ColumnProfile",
    "category_columns",
    "classify_columns",
    "date_columns",
    "detect_best_columns",
    "headers_of",
    "identifier_columns",
    "numeric_columns",
    "select_columns",
]
