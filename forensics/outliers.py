"""
IQR outlier bounds, population z-scores and the amount histogram.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence

from forensics.models import HistogramBin

IQR_MULTIPLIER = 1.5
HISTOGRAM_BINS = 10


@dataclass(frozen=True, slots=True)
class IqrBounds:
    """Quartile bounds and population moments of the clean amount values."""

    q1: float = 0.0
    q3: float = 0.0
    lower: float = 0.0
    upper: float = 0.0
    mean: float = 0.0
    std_dev: float = 0.0

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1

    def is_outlier(self, value: float) -> bool:
        """Boundary values are inside the fence."""
        return value < self.lower or value > self.upper

    def z_score(self, value: float) -> float:
        if self.std_dev == 0:
            return 0.0
        return (value - self.mean) / self.std_dev


def compute_bounds(sorted_values: Sequence[float]) -> IqrBounds:
    """Build bounds from ascending values using index quartiles (no interpolation)."""
    count = len(sorted_values)
    if count == 0:
        return IqrBounds()

    q1 = sorted_values[math.floor(count * 0.25)]
    q3 = sorted_values[math.floor(count * 0.75)]
    iqr = q3 - q1
    mean = sum(sorted_values) / count
    variance = sum((value - mean) ** 2 for value in sorted_values) / count
    return IqrBounds(
        q1=q1,
        q3=q3,
        lower=q1 - IQR_MULTIPLIER * iqr,
        upper=q3 + IQR_MULTIPLIER * iqr,
        mean=mean,
        std_dev=math.sqrt(variance),
    )


def build_histogram(sorted_values: Sequence[float], bins: int = HISTOGRAM_BINS) -> List[HistogramBin]:
    """Equal-width bins between the minimum and maximum; the last bin is closed."""
    if not sorted_values:
        return []

    low = sorted_values[0]
    high = sorted_values[-1]
    width = (high - low) / bins
    histogram: List[HistogramBin] = []
    for position in range(bins):
        start = low + position * width
        end = start + width
        last = position == bins - 1
        count = sum(
            1 for value in sorted_values if value >= start and (value <= end if last else value < end)
        )
        histogram.append(
            HistogramBin(range_start=start, range_end=end, count=count, label=f"{start:.0f}-{end:.0f}")
        )
    return histogram


__all__ = ["IqrBounds", "build_histogram", "compute_bounds"]
