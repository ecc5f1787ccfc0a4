"""Per-entity clustering and Pareto concentration ranking."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from forensics.models import EntityDataPoint, ParetoPoint
from forensics.values import CellValue, render_value

UNKNOWN_ENTITY = "Unknown"
PARETO_LIMIT = 30
VOLUME_SHARE_LIMIT = 0.1
VOLUME_MIN_ROWS = 50


def entity_name(value: CellValue, fallback: str = UNKNOWN_ENTITY) -> str:
    if not value:
        return fallback
    return render_value(value)


@dataclass(slots=True)
class _EntityTotals:
    count: int = 0
    total: float = 0.0
    amounts: List[float] = field(default_factory=list)


class EntityAccumulator:
    """Running count and sum for each distinct category value."""

    def __init__(self) -> None:
        self._entities: Dict[str, _EntityTotals] = {}

    def add(self, name: str, amount: float) -> None:
        totals = self._entities.setdefault(name, _EntityTotals())
        totals.count += 1
        totals.total += amount
        totals.amounts.append(amount)

    def entity_points(self, upper_bound: float, valid_rows: int) -> List[EntityDataPoint]:
        """Flag entities whose average breaches the IQR fence or that dominate volume."""
        points: List[EntityDataPoint] = []
        for name, totals in self._entities.items():
            average = totals.total / totals.count
            dominant = totals.count > valid_rows * VOLUME_SHARE_LIMIT and valid_rows > VOLUME_MIN_ROWS
            points.append(
                EntityDataPoint(
                    id=name,
                    count=totals.count,
                    total_amount=totals.total,
                    average_amount=average,
                    is_outlier=average > upper_bound or dominant,
                )
            )
        return points


def pareto(
    entities: Sequence[EntityDataPoint], grand_total: float, limit: int = PARETO_LIMIT
) -> List[ParetoPoint]:
    ranked = sorted(entities, key=lambda entity: entity.total_amount, reverse=True)
    cumulative = 0.0
    points: List[ParetoPoint] = []
    for entity in ranked[:limit]:
        cumulative += entity.total_amount
        share = (cumulative / grand_total) * 100 if grand_total != 0 else 0.0
        points.append(
            ParetoPoint(name=entity.id, value=entity.total_amount, cumulative_percentage=share)
        )
    return points


__all__ = ["EntityAccumulator", "UNKNOWN_ENTITY", "entity_name", "pareto"]
