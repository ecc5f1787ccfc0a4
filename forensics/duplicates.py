"""
Exact-row and invoice-identifier duplicate detection.

Rows are grouped by a canonical serialization (sorted keys, integral floats
collapsed to ints) so equal rows always share a key regardless of column
order or numeric representation.
"""

from __future__ import annotations

import json
from typing import Dict, List, Optional, Sequence

from forensics.models import Anomaly, AnomalyType
from forensics.risk import RiskLedger
from forensics.values import CellValue, Row, canonical_cell, parse_amount, render_value

ENTIRE_ROW = "(Entire Row)"
IDENTICAL_DATA = "Identical Data"


def row_key(row: Row) -> str:
    payload = {key: canonical_cell(value) for key, value in row.items()}
    return json.dumps(payload, sort_keys=True, ensure_ascii=False, default=str)


def invoice_key(value: CellValue) -> Optional[str]:
    """Trimmed invoice identifier, or ``None`` when blank or falsy."""
    if not value:
        return None
    cleaned = render_value(value).strip()
    return cleaned or None


def _absolute_amount(row: Row, amount_column: str) -> float:
    amount = parse_amount(row.get(amount_column))
    return abs(amount) if amount is not None else 0.0


class DuplicateTracker:
    """Collect duplicate keys during the first pass and resolve groups afterwards."""

    def __init__(self, amount_column: str, invoice_column: Optional[str] = None) -> None:
        self._amount_column = amount_column
        self._invoice_column = invoice_column
        self._rows: Dict[str, List[int]] = {}
        self._invoices: Dict[str, List[int]] = {}

    def record(self, row_index: int, row: Row) -> None:
        self._rows.setdefault(row_key(row), []).append(row_index)
        if self._invoice_column is None:
            return
        key = invoice_key(row.get(self._invoice_column))
        if key is not None:
            self._invoices.setdefault(key, []).append(row_index)

    def exact_duplicates(self, rows: Sequence[Row], ledger: RiskLedger) -> List[Anomaly]:
        """Flag every member of a repeated row group.

        Each extra copy is charged the first member's absolute amount.
        """
        anomalies: List[Anomaly] = []
        for indices in self._rows.values():
            if len(indices) < 2:
                continue
            charge = _absolute_amount(rows[indices[0] - 1], self._amount_column)
            for row_index in indices:
                anomalies.append(
                    Anomaly(
                        row_index=row_index,
                        type=AnomalyType.DUPLICATE_RECORD,
                        column=ENTIRE_ROW,
                        value=IDENTICAL_DATA,
                        row=rows[row_index - 1],
                    )
                )
            for row_index in indices[1:]:
                ledger.charge(row_index, charge)
        return anomalies

    def invoice_duplicates(
        self, rows: Sequence[Row], already_flagged: set[int], ledger: RiskLedger
    ) -> List[Anomaly]:
        """Flag rows sharing an invoice identifier that are not exact duplicates.

        Only members after the first occurrence are charged, with their own amount.
        """
        if self._invoice_column is None:
            return []
        anomalies: List[Anomaly] = []
        for invoice, indices in self._invoices.items():
            if len(indices) < 2:
                continue
            for position, row_index in enumerate(indices):
                if row_index in already_flagged:
                    continue
                row = rows[row_index - 1]
                anomalies.append(
                    Anomaly(
                        row_index=row_index,
                        type=AnomalyType.DUPLICATE_INVOICE_ID,
                        column=self._invoice_column,
                        value=invoice,
                        row=row,
                    )
                )
                if position > 0:
                    ledger.charge(row_index, _absolute_amount(row, self._amount_column))
        return anomalies


__all__ = ["DuplicateTracker", "invoice_key", "row_key"]
