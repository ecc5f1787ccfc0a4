"""
First-digit and first-two-digit Benford's Law tests.

Conformity bands follow the Mean Absolute Deviation ranges used in forensic
accounting practice.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Literal, Sequence, Tuple

from forensics.digits import leading_digit, leading_two_digits
from forensics.models import BenfordDataPoint, Conformity
from forensics.values import CellValue

Scope = Literal["first", "first_two"]

EXPECTED_FIRST_DIGIT: Tuple[float, ...] = (30.1, 17.6, 12.5, 9.7, 7.9, 6.7, 5.8, 5.1, 4.6)
EXPECTED_FIRST_TWO_DIGITS: Tuple[float, ...] = tuple(
    math.log10(1 + 1 / digit) * 100 for digit in range(10, 100)
)

# Upper MAD bounds for Close, Acceptable and Marginally Acceptable.
CONFORMITY_THRESHOLDS: dict[str, Tuple[float, float, float]] = {
    "first": (0.006, 0.012, 0.015),
    "first_two": (0.0012, 0.0018, 0.0022),
}


@dataclass(frozen=True, slots=True)
class BenfordTest:
    points: Tuple[BenfordDataPoint, ...]
    mad: float
    conformity: Conformity


def classify_conformity(mad: float, scope: Scope) -> Conformity:
    close, acceptable, marginal = CONFORMITY_THRESHOLDS[scope]
    if mad <= close:
        return "Close"
    if mad <= acceptable:
        return "Acceptable"
    if mad <= marginal:
        return "Marginally Acceptable"
    return "Nonconformity"


def mean_absolute_deviation(points: Sequence[BenfordDataPoint]) -> float:
    if not points:
        return 0.0
    deviation = sum(abs(point.actual / 100 - point.expected / 100) for point in points)
    return deviation / len(points)


def _build_points(
    counts: Sequence[int], total: int, first_digit: int, expected: Sequence[float]
) -> Tuple[BenfordDataPoint, ...]:
    return tuple(
        BenfordDataPoint(
            digit=first_digit + offset,
            count=count,
            actual=(count / total) * 100 if total > 0 else 0.0,
            expected=expected[offset],
        )
        for offset, count in enumerate(counts)
    )


class BenfordCounter:
    """Accumulate digit buckets one value at a time."""

    def __init__(self) -> None:
        self._first: List[int] = [0] * 9
        self._first_two: List[int] = [0] * 90
        self.first_total = 0
        self.first_two_total = 0

    def add(self, value: CellValue) -> None:
        digit = leading_digit(value)
        if digit is not None:
            self._first[digit - 1] += 1
            self.first_total += 1

        pair = leading_two_digits(value)
        if pair is not None and 10 <= pair <= 99:
            self._first_two[pair - 10] += 1
            self.first_two_total += 1

    def first_digit_result(self) -> BenfordTest:
        points = _build_points(self._first, self.first_total, 1, EXPECTED_FIRST_DIGIT)
        mad = mean_absolute_deviation(points)
        return BenfordTest(points=points, mad=mad, conformity=classify_conformity(mad, "first"))

    def second_digit_result(self) -> BenfordTest:
        points = _build_points(
            self._first_two, self.first_two_total, 10, EXPECTED_FIRST_TWO_DIGITS
        )
        mad = mean_absolute_deviation(points)
        return BenfordTest(
            points=points, mad=mad, conformity=classify_conformity(mad, "first_two")
        )


__all__ = [
    "BenfordCounter",
    "BenfordTest",
    "EXPECTED_FIRST_DIGIT",
    "EXPECTED_FIRST_TWO_DIGITS",
    "classify_conformity",
    "mean_absolute_deviation",
]
