"""
Daily time series and day-of-week/hour activity grid.

All timestamps are interpreted in UTC, both for the daily key and for the
heatmap cell, so results do not depend on the host timezone.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from forensics.models import HeatmapCell, TimeSeriesPoint
from forensics.values import CellValue, is_number, parse_date_text

SERIAL_EPOCH_OFFSET = 25569
MS_PER_DAY = 86400 * 1000
DAYS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_date_value(value: CellValue) -> Optional[datetime]:
    """Parse a spreadsheet serial number or a date string; ``None`` if unusable."""
    if not value:
        return None
    if is_number(value):
        try:
            millis = round((value - SERIAL_EPOCH_OFFSET) * MS_PER_DAY)
            return _EPOCH + timedelta(milliseconds=millis)
        except (OverflowError, ValueError):
            return None
    if isinstance(value, str):
        return parse_date_text(value)
    return None


def _weekday_index(moment: datetime) -> int:
    """Sunday-based weekday, matching ``DAYS``."""
    return (moment.weekday() + 1) % 7


class TemporalAccumulator:
    def __init__(self) -> None:
        self._daily: Dict[str, List[float]] = {}
        self._grid: List[List[int]] = [[0] * 24 for _ in DAYS]
        self._earliest: Optional[datetime] = None
        self._latest: Optional[datetime] = None

    def add(self, moment: datetime, amount: float) -> None:
        if self._earliest is None or moment < self._earliest:
            self._earliest = moment
        if self._latest is None or moment > self._latest:
            self._latest = moment

        bucket = self._daily.setdefault(moment.date().isoformat(), [0.0, 0])
        bucket[0] += amount
        bucket[1] += 1
        self._grid[_weekday_index(moment)][moment.hour] += 1

    def day_span(self) -> Optional[float]:
        """Days between the earliest and latest timestamp, ``None`` without data."""
        if self._earliest is None or self._latest is None:
            return None
        return (self._latest - self._earliest).total_seconds() / 86400

    def time_series(self) -> List[TimeSeriesPoint]:
        return [
            TimeSeriesPoint(date=day, amount=amount, count=int(count))
            for day, (amount, count) in sorted(self._daily.items())
        ]

    def heatmap(self) -> List[HeatmapCell]:
        """Full 7x24 grid with intensity relative to the busiest cell."""
        peak = max((count for row in self._grid for count in row), default=0)
        if peak == 0:
            return []
        return [
            HeatmapCell(day=DAYS[day], hour=hour, count=count, intensity=count / peak)
            for day, row in enumerate(self._grid)
            for hour, count in enumerate(row)
        ]


__all__ = ["DAYS", "TemporalAccumulator", "parse_date_value"]
