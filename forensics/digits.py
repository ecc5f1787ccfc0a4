"""
Leading-digit extraction for Benford testing.

The first non-zero digit is searched anywhere in the rendered value, so an
identifier such as ``INV-2024`` yields ``2``. Conformity thresholds are tuned
to this rule.
"""

from __future__ import annotations

import re
from typing import Optional

from forensics.values import CellValue, render_value

_NON_ZERO_DIGIT = re.compile(r"[1-9]")
_NON_DIGITS = re.compile(r"[^0-9]")


def leading_digit(value: CellValue) -> Optional[int]:
    """Return the first digit 1-9 found in the value, or ``None``."""
    if value is None:
        return None
    match = _NON_ZERO_DIGIT.search(render_value(value))
    if match is None:
        return None
    return int(match.group(0))


def leading_two_digits(value: CellValue) -> Optional[int]:
    """Return the first two significant digits as an integer in 10-99."""
    if value is None:
        return None
    digits = _NON_DIGITS.sub("", render_value(value)).lstrip("0")
    if len(digits) < 2:
        return None
    return int(digits[:2])


__all__ = ["leading_digit", "leading_two_digits"]
