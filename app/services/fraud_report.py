"""Narrative fraud risk assessment generated by Gemini from a finished analysis."""

from __future__ import annotations

import json
import logging
from textwrap import dedent
from typing import Protocol

from forensics import AnalysisResult, Anomaly

from app.clients.gemini import GeminiModelError

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "Error: API Key is missing. Please configure your environment."
FAILURE_MESSAGE = (
    "An error occurred while generating the AI report. "
    "Please check your network or API key."
)
EMPTY_MESSAGE = "Unable to generate report."
CONTEXT_PREVIEW_CHARS = 150


class TextGenerator(Protocol):
    @property
    def enabled(self) -> bool: ...

    async def generate_text(self, prompt: str) -> str: ...


def _describe_anomaly(anomaly: Anomaly) -> str:
    context = json.dumps(dict(anomaly.row), ensure_ascii=False, default=str)
    return (
        f"- Row {anomaly.row_index} ({anomaly.type.value}): Value={anomaly.value}, "
        f"Context={context[:CONTEXT_PREVIEW_CHARS]}..."
    )


def build_report_prompt(result: AnalysisResult) -> str:
    """Serialize the headline findings into an auditor-facing prompt."""
    stats = result.stats
    top = "\n".join(_describe_anomaly(anomaly) for anomaly in stats.top_anomalies)
    return dedent(
        (
            "You are an expert forensic accountant and fraud auditor (CFE).\n"
            "Analyze the following statistical data derived from a Benford's Law test, "
            "outlier detection, cluster analysis and data quality checks on a "
            "financial dataset.\n\n"
            f'Target Column: "{result.column_name}"\n'
            f"Total Records: {result.total_rows}\n"
            f"Valid Numeric Records: {result.valid_rows}\n"
            f"Average Amount: {stats.average_amount:.2f}\n\n"
            f"OVERALL FRAUD RISK SCORE: {result.risk_score}/100 ({result.risk_level})\n\n"
            "Data Quality & Risk Flags:\n"
            f"- Statistical Outliers (IQR Method): {stats.outlier_count} records\n"
            f"- Duplicate Rows / Invoice IDs: {stats.duplicate_count}\n"
            f"- Negative Amounts: {stats.negative_count}\n"
            f"- Missing/Null Values: {stats.missing_count}\n"
            f"- Total Amount At Risk: {stats.total_at_risk:.2f} "
            f"(annualized forecast {stats.forecast_loss:.2f})\n\n"
            "Cluster Analysis (Entity Risk):\n"
            f"- Category Used: {result.category_column_name or 'None'}\n"
            "- High Risk Entities (Outliers in Frequency/Amount): "
            f"{stats.high_risk_entities}\n\n"
            "Timing Analysis:\n"
            f"- Time Series Data Available: {'Yes' if result.time_series_data else 'No'}\n"
            f"- Heatmap Data (Day/Hour) Available: {'Yes' if result.heatmap_data else 'No'}\n\n"
            "Benford's Law Analysis:\n"
            f"- 1-Digit MAD: {result.mad:.4f} ({result.conformity})\n"
            f"- 2-Digit MAD: {result.mad_2_digit:.4f} ({result.conformity_2_digit})\n\n"
            "TOP 5 SPECIFIC SUSPICIOUS TRANSACTIONS (Investigate These):\n"
            f"{top}\n\n"
            'Provide a concise but detailed "Fraud Risk Assessment" report in Markdown.\n'
            "Include:\n"
            "1. **Executive Summary**: start with the risk score and level; state "
            "clearly whether the data looks manipulated.\n"
            "2. **Specific Anomalies**: reference the top suspicious transactions "
            "above and name the rows or invoices to pull.\n"
            "3. **Benford's Law Analysis**: compare the 1-digit and 2-digit results.\n"
            "4. **Cluster & Entity Analysis**: discuss vendors or employees with "
            "unusual frequencies or amounts when high risk entities exist.\n"
            "5. **Recommendations**: actionable next steps.\n\n"
            "Keep the tone professional, objective and cautious."
        )
    )


class FraudReportService:
    """Turn an ``AnalysisResult`` into narrative text, never failing the caller."""

    def __init__(self, generator: TextGenerator) -> None:
        self._generator = generator

    async def generate(self, result: AnalysisResult) -> str:
        if not self._generator.enabled:
            logger.warning("Gemini API key missing; returning placeholder report.")
            return MISSING_KEY_MESSAGE

        prompt = build_report_prompt(result)
        try:
            text = await self._generator.generate_text(prompt)
        except GeminiModelError as exc:
            logger.warning("Narrative report generation failed: %s", exc)
            return FAILURE_MESSAGE
        return text.strip() or EMPTY_MESSAGE


__all__ = [
    "EMPTY_MESSAGE",
    "FAILURE_MESSAGE",
    "FraudReportService",
    "MISSING_KEY_MESSAGE",
    "build_report_prompt",
]
