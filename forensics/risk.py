"""
Composite risk scoring and monetary exposure.

The score is an additive heuristic capped at 100. Monetary exposure is
tracked per row so a transaction is never counted twice, whatever number of
anomalies it carries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Sequence, Tuple

from forensics.models import Anomaly, AnomalyType, Conformity, RiskBreakdown, RiskLevel

MAX_SCORE = 100
DAYS_PER_YEAR = 365
MONTHS_PER_YEAR = 12
ROUND_NUMBER_UNIT = 1000


class RiskLedger:
    """Per-row monetary risk; a later charge replaces an earlier one."""

    def __init__(self) -> None:
        self._amounts: Dict[int, float] = {}

    def charge(self, row_index: int, amount: float) -> None:
        self._amounts[row_index] = amount

    def items(self) -> Iterator[Tuple[int, float]]:
        return iter(self._amounts.items())

    @property
    def total(self) -> float:
        return sum(self._amounts.values())

    def __contains__(self, row_index: object) -> bool:
        return row_index in self._amounts

    def __len__(self) -> int:
        return len(self._amounts)


@dataclass(frozen=True, slots=True)
class RiskSignals:
    """Inputs to the composite score."""

    conformity: Conformity
    conformity_2_digit: Conformity
    outlier_count: int
    duplicate_count: int
    round_number_count: int
    valid_rows: int

    def rate(self, count: int) -> float:
        return count / self.valid_rows if self.valid_rows > 0 else 0.0


def count_round_numbers(values: Iterable[float]) -> int:
    return sum(1 for value in values if value != 0 and value % ROUND_NUMBER_UNIT == 0)


def score_risk(signals: RiskSignals) -> int:
    score = 0

    if signals.conformity == "Nonconformity":
        score += 25
    elif signals.conformity == "Marginally Acceptable":
        score += 15
    if signals.conformity_2_digit == "Nonconformity":
        score += 10

    outlier_rate = signals.rate(signals.outlier_count)
    if outlier_rate > 0.05:
        score += 25
    elif outlier_rate > 0.01:
        score += 15
    elif outlier_rate > 0:
        score += 5

    duplicate_rate = signals.rate(signals.duplicate_count)
    if duplicate_rate > 0.05:
        score += 20
    elif duplicate_rate > 0:
        score += 10

    round_rate = signals.rate(signals.round_number_count)
    if round_rate > 0.1:
        score += 20
    elif round_rate > 0.05:
        score += 10

    return min(score, MAX_SCORE)


def risk_level(score: int) -> RiskLevel:
    if score >= 75:
        return "Critical"
    if score >= 50:
        return "High"
    if score >= 25:
        return "Medium"
    return "Low"


def breakdown(ledger: RiskLedger, anomalies: Sequence[Anomaly]) -> RiskBreakdown:
    """Bucket each risked row once: outlier before duplicate before negative."""
    types_by_row: Dict[int, set[AnomalyType]] = {}
    for anomaly in anomalies:
        types_by_row.setdefault(anomaly.row_index, set()).add(anomaly.type)

    outliers = duplicates = negatives = 0.0
    for row_index, amount in ledger.items():
        types = types_by_row.get(row_index, set())
        if AnomalyType.STATISTICAL_OUTLIER in types:
            outliers += amount
        elif any(kind.is_duplicate for kind in types):
            duplicates += amount
        elif AnomalyType.NEGATIVE_AMOUNT in types:
            negatives += amount
    return RiskBreakdown(outliers=outliers, duplicates=duplicates, negatives=negatives)


def forecast_loss(total_at_risk: float, day_span: Optional[float]) -> float:
    """Annualize exposure.

    ``day_span`` is ``None`` when no dates were parsed; the exposure is then
    assumed to represent one month.
    """
    if total_at_risk <= 0:
        return 0.0
    if day_span is None:
        return total_at_risk * MONTHS_PER_YEAR
    if day_span > 1:
        return total_at_risk / day_span * DAYS_PER_YEAR
    return total_at_risk


__all__ = [
    "RiskLedger",
    "RiskSignals",
    "breakdown",
    "count_round_numbers",
    "forecast_loss",
    "risk_level",
    "score_risk",
]
