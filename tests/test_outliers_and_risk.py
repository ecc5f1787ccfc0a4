try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from forensics.models import Anomaly, AnomalyType
from forensics.outliers import build_histogram, compute_bounds
from forensics.risk import (
    RiskLedger,
    RiskSignals,
    breakdown,
    count_round_numbers,
    forecast_loss,
    risk_level,
    score_risk,
)


def test_bounds_use_index_quartiles() -> None:
    bounds = compute_bounds([1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0])
    assert bounds.q1 == 3.0
    assert bounds.q3 == 7.0
    assert bounds.iqr == 4.0
    assert bounds.lower == -3.0
    assert bounds.upper == 13.0


def test_boundary_values_are_not_outliers() -> None:
    bounds = compute_bounds([1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0])
    assert not bounds.is_outlier(13.0)
    assert not bounds.is_outlier(-3.0)
    assert bounds.is_outlier(13.01)
    assert bounds.is_outlier(-3.01)


def test_z_score_uses_population_deviation() -> None:
    bounds = compute_bounds([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0])
    assert bounds.mean == 5.0
    assert bounds.std_dev == 2.0
    assert bounds.z_score(9.0) == 2.0


def test_constant_values_have_zero_z_scores() -> None:
    bounds = compute_bounds([50.0, 50.0, 50.0])
    assert bounds.std_dev == 0
    assert bounds.z_score(50.0) == 0.0
    assert bounds.z_score(80.0) == 0.0


def test_histogram_closes_last_bin() -> None:
    values = [0.0, 5.0, 10.0, 95.0, 100.0]
    histogram = build_histogram(values)
    assert len(histogram) == 10
    assert sum(item.count for item in histogram) == len(values)
    assert histogram[-1].count == 2
    assert histogram[0].label == "0-10"
    assert build_histogram([]) == []


@pytest.mark.parametrize(
    ("score", "level"),
    [(100, "Critical"), (75, "Critical"), (74, "High"), (50, "High"), (49, "Medium"), (25, "Medium"), (24, "Low"), (0, "Low")],
)
def test_risk_level_thresholds(score, level) -> None:
    assert risk_level(score) == level


def test_score_is_capped_at_one_hundred() -> None:
    signals = RiskSignals(
        conformity="Nonconformity",
        conformity_2_digit="Nonconformity",
        outlier_count=10,
        duplicate_count=10,
        round_number_count=10,
        valid_rows=20,
    )
    assert score_risk(signals) == 100


def test_score_components() -> None:
    signals = RiskSignals(
        conformity="Marginally Acceptable",
        conformity_2_digit="Acceptable",
        outlier_count=1,
        duplicate_count=0,
        round_number_count=6,
        valid_rows=100,
    )
    # 15 marginal + 5 outliers (1%) + 10 round numbers (6%)
    assert score_risk(signals) == 30


def test_score_without_valid_rows_only_counts_benford() -> None:
    signals = RiskSignals("Close", "Nonconformity", 0, 0, 0, 0)
    assert score_risk(signals) == 10


def test_round_numbers_exclude_zero() -> None:
    assert count_round_numbers([0.0, 1000.0, -2000.0, 1500.0, 10.0]) == 2


def test_breakdown_prefers_outlier_then_duplicate_then_negative() -> None:
    ledger = RiskLedger()
    ledger.charge(1, 500.0)
    ledger.charge(2, 40.0)
    ledger.charge(3, 7.0)
    anomalies = [
        Anomaly(1, AnomalyType.NEGATIVE_AMOUNT, "amt", -500.0, {}),
        Anomaly(1, AnomalyType.STATISTICAL_OUTLIER, "amt", -500.0, {}),
        Anomaly(2, AnomalyType.NEGATIVE_AMOUNT, "amt", -40.0, {}),
        Anomaly(2, AnomalyType.DUPLICATE_INVOICE_ID, "inv", "X1", {}),
        Anomaly(3, AnomalyType.NEGATIVE_AMOUNT, "amt", -7.0, {}),
    ]

    result = breakdown(ledger, anomalies)

    assert result.outliers == 500.0
    assert result.duplicates == 40.0
    assert result.negatives == 7.0
    assert ledger.total == 547.0


def test_ledger_keeps_one_amount_per_row() -> None:
    ledger = RiskLedger()
    ledger.charge(4, 10.0)
    ledger.charge(4, 25.0)
    assert len(ledger) == 1
    assert ledger.total == 25.0


def test_forecast_loss_annualization() -> None:
    assert forecast_loss(0.0, None) == 0.0
    assert forecast_loss(100.0, None) == 1200.0
    assert forecast_loss(100.0, 0.5) == 100.0
    assert forecast_loss(100.0, 1.0) == 100.0
    assert forecast_loss(100.0, 73.0) == pytest.approx(500.0)
