#!/usr/bin/env python
"""Screen a ledger export from the command line.

Rows are read from a JSON array of objects or a CSV file with a header row.
Column roles are auto-detected unless supplied with the role flags; any
manual flag switches to manual selection.

Example usages::

    python -m scripts.screen_ledger expenses.csv --summary
    python -m scripts.screen_ledger ledger.json --amount Debit --category Vendor
    python -m scripts.screen_ledger ledger.csv --report
"""

from __future__ import annotations

import argparse
import asyncio
import csv
import json
import logging
import re
import sys
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.clients import GeminiClient  # noqa: E402
from app.core.config import get_settings  # noqa: E402
from app.core.logging import configure_logging  # noqa: E402
from app.services import FraudReportService, ScreeningService  # noqa: E402
from app.schemas import AnalysisResponse, ColumnRoles  # noqa: E402
from forensics import AnalysisConfig, AnalysisResult, ForensicsError  # noqa: E402

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2
EXIT_RUNTIME_ERROR = 5

_INTEGER = re.compile(r"^[+-]?\d+$")
_DECIMAL = re.compile(r"^[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?$")

logger = logging.getLogger("scripts.screen_ledger")


def _coerce_cell(raw: str | None) -> Any:
    """Turn CSV text into the cell types a spreadsheet export would carry."""
    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    if _INTEGER.match(text):
        return int(text)
    if _DECIMAL.match(text):
        return float(text)
    return raw


def load_rows(path: Path) -> list[dict[str, Any]]:
    if path.suffix.lower() == ".json":
        payload = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(payload, list) or not all(isinstance(row, dict) for row in payload):
            raise ValueError("JSON input must be an array of objects.")
        return payload

    with path.open(newline="", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        return [{key: _coerce_cell(value) for key, value in row.items()} for row in reader]


def _manual_config(args: argparse.Namespace) -> AnalysisConfig | None:
    if not args.amount:
        if any((args.date, args.category, args.source, args.invoice)):
            raise ForensicsError("--amount is required when selecting columns manually.")
        return None
    return AnalysisConfig(
        amount_column=args.amount,
        date_column=args.date,
        category_column=args.category,
        source_column=args.source,
        invoice_column=args.invoice,
    )


def render_summary(result: AnalysisResult) -> str:
    stats = result.stats
    lines = [
        f"Risk score: {result.risk_score}/100 ({result.risk_level})",
        f"Rows: {result.total_rows} total, {result.valid_rows} valid",
        f"Benford 1-digit MAD: {result.mad:.4f} ({result.conformity})",
        f"Benford 2-digit MAD: {result.mad_2_digit:.4f} ({result.conformity_2_digit})",
        f"Outliers: {stats.outlier_count}  Duplicates: {stats.duplicate_count}  "
        f"Negatives: {stats.negative_count}  Missing: {stats.missing_count}",
        f"Total at risk: {stats.total_at_risk:,.2f}  Forecast loss: {stats.forecast_loss:,.2f}",
    ]
    if stats.top_anomalies:
        lines.append("Top anomalies:")
        lines.extend(
            f"  - Row {anomaly.row_index} ({anomaly.type.value}): {anomaly.value}"
            for anomaly in stats.top_anomalies
        )
    return "\n".join(lines)


async def _run(args: argparse.Namespace, rows: list[dict[str, Any]]) -> int:
    if not rows:
        print("Input contains no rows.", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    outcome = await ScreeningService().screen(rows, _manual_config(args))
    if args.summary:
        origin = "auto-detected" if outcome.auto_detected else "manual"
        roles = ColumnRoles.from_config(outcome.config).model_dump_json(by_alias=True)
        print(f"Column roles ({origin}): {roles}")
        print(render_summary(outcome.result))
    else:
        print(AnalysisResponse.from_result(outcome.result).model_dump_json(by_alias=True, indent=2))

    if args.report:
        settings = get_settings()
        report_service = FraudReportService(GeminiClient(settings.gemini))
        print()
        print(await report_service.generate(outcome.result))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Screen a ledger export for fraud and data-quality indicators."
    )
    parser.add_argument("input", help="Path to a .json or .csv file of rows.")
    parser.add_argument("--amount", help="Amount column (enables manual selection).")
    parser.add_argument("--date", help="Date column.")
    parser.add_argument("--category", help="Category/vendor column.")
    parser.add_argument("--source", help="Source/employee column.")
    parser.add_argument("--invoice", help="Invoice identifier column.")
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print a short text summary instead of the full JSON payload.",
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="Append a Gemini narrative assessment (requires GEMINI_API_KEY).",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level.")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if not Path(args.input).exists():
        print(f"Input file {args.input} does not exist.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        rows = load_rows(Path(args.input))
    except (ValueError, OSError) as exc:
        logger.error("Unable to read %s: %s", args.input, exc)
        return EXIT_RUNTIME_ERROR

    try:
        return asyncio.run(_run(args, rows))
    except ForensicsError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
