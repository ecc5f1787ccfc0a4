"""
Two-pass screening pipeline.

The first pass validates amounts and feeds every accumulator; the second pass
runs once the global IQR fence is known and classifies outliers. The run is a
pure function of ``(rows, config)``: every call builds fresh state.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from forensics.benford import BenfordCounter
from forensics.duplicates import DuplicateTracker
from forensics.entities import EntityAccumulator, entity_name, pareto
from forensics.flow_graph import FlowAccumulator
from forensics.models import (
    AnalysisConfig,
    AnalysisResult,
    AnalysisStats,
    Anomaly,
    AnomalyType,
    FlowGraph,
    ScatterPoint,
)
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
from forensics.temporal import TemporalAccumulator, parse_date_value
from forensics.values import Row, is_absent, parse_amount

logger = logging.getLogger(__name__)

MISSING_PLACEHOLDER = "NULL/EMPTY"
TOP_ANOMALY_COUNT = 5


def perform_analysis(rows: Sequence[Row], config: AnalysisConfig) -> AnalysisResult:
    """Screen ``rows`` using the column roles in ``config``."""
    amount_column = config.amount_column
    category_column = config.category_column
    source_column = config.source_column

    benford = BenfordCounter()
    duplicates = DuplicateTracker(amount_column, config.invoice_column)
    entities = EntityAccumulator()
    flows = FlowAccumulator()
    temporal = TemporalAccumulator()
    ledger = RiskLedger()

    anomalies: List[Anomaly] = []
    amounts: List[Optional[float]] = []
    clean_values: List[float] = []
    total_amount = 0.0

    for position, row in enumerate(rows):
        row_index = position + 1
        duplicates.record(row_index, row)

        raw = row.get(amount_column)
        amount = None if is_absent(raw) else parse_amount(raw)
        amounts.append(amount)
        if amount is None:
            anomalies.append(
                Anomaly(
                    row_index=row_index,
                    type=AnomalyType.MISSING_VALUE,
                    column=amount_column,
                    value=MISSING_PLACEHOLDER if is_absent(raw) else raw,
                    row=row,
                )
            )
            continue

        if amount < 0:
            anomalies.append(
                Anomaly(
                    row_index=row_index,
                    type=AnomalyType.NEGATIVE_AMOUNT,
                    column=amount_column,
                    value=amount,
                    row=row,
                )
            )
            ledger.charge(row_index, abs(amount))

        total_amount += amount
        clean_values.append(amount)

        benford.add(row.get(config.invoice_column) if config.invoice_column else amount)

        if category_column:
            target = entity_name(row.get(category_column))
            entities.add(target, amount)
            if source_column:
                flows.add(entity_name(row.get(source_column)), target, amount)

        if config.date_column:
            moment = parse_date_value(row.get(config.date_column))
            if moment is not None:
                temporal.add(moment, amount)

    valid_rows = len(clean_values)
    clean_values.sort()
    bounds = compute_bounds(clean_values)

    scatter: List[ScatterPoint] = []
    for position, amount in enumerate(amounts):
        if amount is None:
            continue
        row_index = position + 1
        outlier = bounds.is_outlier(amount)
        scatter.append(
            ScatterPoint(
                id=row_index,
                index=position,
                amount=amount,
                is_outlier=outlier,
                z_score=bounds.z_score(amount),
            )
        )
        if outlier:
            anomalies.append(
                Anomaly(
                    row_index=row_index,
                    type=AnomalyType.STATISTICAL_OUTLIER,
                    column=amount_column,
                    value=amount,
                    row=rows[position],
                )
            )
            ledger.charge(row_index, abs(amount))

    exact = duplicates.exact_duplicates(rows, ledger)
    anomalies.extend(exact)
    anomalies.extend(
        duplicates.invoice_duplicates(rows, {anomaly.row_index for anomaly in exact}, ledger)
    )

    entity_data = entities.entity_points(bounds.upper, valid_rows) if category_column else []
    pareto_data = pareto(entity_data, total_amount) if category_column else []
    graph = flows.build() if category_column and source_column else FlowGraph()

    first = benford.first_digit_result()
    second = benford.second_digit_result()

    outlier_count = sum(1 for a in anomalies if a.type is AnomalyType.STATISTICAL_OUTLIER)
    duplicate_count = sum(1 for a in anomalies if a.type.is_duplicate)
    score = score_risk(
        RiskSignals(
            conformity=first.conformity,
            conformity_2_digit=second.conformity,
            outlier_count=outlier_count,
            duplicate_count=duplicate_count,
            round_number_count=count_round_numbers(clean_values),
            valid_rows=valid_rows,
        )
    )

    total_at_risk = ledger.total
    top_anomalies = sorted(anomalies, key=lambda a: a.magnitude, reverse=True)[:TOP_ANOMALY_COUNT]
    ordered = sorted(anomalies, key=lambda a: a.row_index)

    stats = AnalysisStats(
        duplicate_count=duplicate_count,
        negative_count=sum(1 for a in anomalies if a.type is AnomalyType.NEGATIVE_AMOUNT),
        missing_count=sum(1 for a in anomalies if a.type is AnomalyType.MISSING_VALUE),
        outlier_count=outlier_count,
        total_amount=total_amount,
        average_amount=total_amount / valid_rows if valid_rows else 0.0,
        high_risk_entities=sum(1 for entity in entity_data if entity.is_outlier),
        top_anomalies=tuple(top_anomalies),
        total_at_risk=total_at_risk,
        forecast_loss=forecast_loss(total_at_risk, temporal.day_span()),
        risk_breakdown=breakdown(ledger, anomalies),
    )

    logger.debug(
        "Screened %d rows (%d valid) on '%s': score=%d anomalies=%d",
        len(rows),
        valid_rows,
        amount_column,
        score,
        len(anomalies),
    )

    return AnalysisResult(
        column_name=amount_column,
        date_column_name=config.date_column,
        category_column_name=category_column,
        source_column_name=source_column,
        invoice_column_name=config.invoice_column,
        total_rows=len(rows),
        valid_rows=valid_rows,
        mad=first.mad,
        conformity=first.conformity,
        chart_data=first.points,
        mad_2_digit=second.mad,
        conformity_2_digit=second.conformity,
        chart_data_2_digit=second.points,
        histogram_data=tuple(build_histogram(clean_values)),
        time_series_data=tuple(temporal.time_series()),
        scatter_data=tuple(scatter),
        entity_data=tuple(entity_data),
        heatmap_data=tuple(temporal.heatmap()),
        pareto_data=tuple(pareto_data),
        graph_data=graph,
        anomalies=tuple(ordered),
        risk_score=score,
        risk_level=risk_level(score),
        stats=stats,
    )


__all__ = ["perform_analysis"]
