try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import math

import pytest

from forensics.benford import (
    EXPECTED_FIRST_DIGIT,
    EXPECTED_FIRST_TWO_DIGITS,
    BenfordCounter,
    classify_conformity,
)
from forensics.digits import leading_digit, leading_two_digits


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (4521, 4),
        (0.0034, 3),
        (-872.5, 8),
        ("INV-2024", 2),
        ("A-0009", 9),
        (100.0, 1),
        ("000", None),
        ("no digits", None),
        (None, None),
    ],
)
def test_leading_digit_scans_whole_string(value, expected) -> None:
    assert leading_digit(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (4521, 45),
        (0.0034, 34),
        ("INV-007-1", 71),
        (100.5, 10),
        (7, None),
        ("0009", None),
        (None, None),
    ],
)
def test_leading_two_digits_strips_non_digits_and_zeros(value, expected) -> None:
    assert leading_two_digits(value) == expected


def test_expected_tables() -> None:
    assert len(EXPECTED_FIRST_DIGIT) == 9
    assert len(EXPECTED_FIRST_TWO_DIGITS) == 90
    assert EXPECTED_FIRST_TWO_DIGITS[0] == pytest.approx(math.log10(1.1) * 100)
    assert sum(EXPECTED_FIRST_TWO_DIGITS) == pytest.approx(100.0)


def test_counter_distribution_for_known_amounts() -> None:
    counter = BenfordCounter()
    for amount in (111.0, 123.0, 199.0, 211.0, 234.0):
        counter.add(amount)

    result = counter.first_digit_result()
    by_digit = {point.digit: point for point in result.points}
    assert by_digit[1].count == 3
    assert by_digit[2].count == 2
    assert by_digit[1].actual == pytest.approx(60.0)
    assert by_digit[2].actual == pytest.approx(40.0)
    assert all(by_digit[d].actual == 0 for d in range(3, 10))
    assert sum(point.actual for point in result.points) == pytest.approx(100.0)

    second = counter.second_digit_result()
    assert len(second.points) == 90
    assert sum(point.actual for point in second.points) == pytest.approx(100.0)


def test_counter_without_values_reports_zero_percentages() -> None:
    result = BenfordCounter().first_digit_result()
    assert all(point.actual == 0 for point in result.points)
    assert result.conformity == "Nonconformity"


@pytest.mark.parametrize(
    ("mad", "scope", "expected"),
    [
        (0.006, "first", "Close"),
        (0.0061, "first", "Acceptable"),
        (0.012, "first", "Acceptable"),
        (0.015, "first", "Marginally Acceptable"),
        (0.0151, "first", "Nonconformity"),
        (0.0012, "first_two", "Close"),
        (0.0018, "first_two", "Acceptable"),
        (0.0022, "first_two", "Marginally Acceptable"),
        (0.0023, "first_two", "Nonconformity"),
    ],
)
def test_conformity_bands(mad, scope, expected) -> None:
    assert classify_conformity(mad, scope) == expected
