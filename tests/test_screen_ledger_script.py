"""Tests for the ledger screening command line tool."""

from __future__ import annotations

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import json
from pathlib import Path

import pytest

from scripts import screen_ledger

CSV_LEDGER = """Invoice No,Vendor,Amount
INV-1,Acme,120.50
INV-2,Acme,99
INV-3,Globex,240
INV-3,Globex,240
INV-4,Initech,-75.25
INV-5,Initech,
"""


def _write(path: Path, contents: str) -> Path:
    path.write_text(contents, encoding="utf-8")
    return path


def test_main_requires_existing_input(tmp_path: Path) -> None:
    exit_code = screen_ledger.main([str(tmp_path / "missing.csv")])
    assert exit_code == screen_ledger.EXIT_RUNTIME_ERROR


def test_csv_summary(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    ledger = _write(tmp_path / "ledger.csv", CSV_LEDGER)

    exit_code = screen_ledger.main([str(ledger), "--summary"])

    assert exit_code == screen_ledger.EXIT_OK
    out = capsys.readouterr().out
    assert 'Column roles (auto-detected): {"amountColumn":"Amount"' in out
    assert "Rows: 6 total, 5 valid" in out
    assert "Duplicates: 2" in out
    assert "Negatives: 1  Missing: 1" in out
    assert "Row 5 (Negative Amount): -75.25" in out


def test_json_payload_with_manual_columns(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rows = [
        {"Debit": 100, "Credit": 5, "Payee": "Acme"},
        {"Debit": 250, "Credit": 7, "Payee": "Globex"},
        {"Debit": 300, "Credit": 9, "Payee": "Acme"},
    ]
    ledger = _write(tmp_path / "ledger.json", json.dumps(rows))

    exit_code = screen_ledger.main([str(ledger), "--amount", "Credit", "--category", "Payee"])

    assert exit_code == screen_ledger.EXIT_OK
    payload = json.loads(capsys.readouterr().out)
    assert payload["columnName"] == "Credit"
    assert payload["categoryColumnName"] == "Payee"
    assert payload["stats"]["totalAmount"] == 21.0


def test_role_flags_need_amount(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    ledger = _write(tmp_path / "ledger.csv", CSV_LEDGER)

    exit_code = screen_ledger.main([str(ledger), "--category", "Vendor"])

    assert exit_code == screen_ledger.EXIT_CONFIG_ERROR
    assert "--amount is required" in capsys.readouterr().err


def test_unknown_manual_column(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    ledger = _write(tmp_path / "ledger.csv", CSV_LEDGER)

    exit_code = screen_ledger.main([str(ledger), "--amount", "Total"])

    assert exit_code == screen_ledger.EXIT_CONFIG_ERROR
    assert "Amount column 'Total' does not exist" in capsys.readouterr().err


def test_invalid_json_input(tmp_path: Path) -> None:
    ledger = _write(tmp_path / "ledger.json", json.dumps({"rows": []}))
    assert screen_ledger.main([str(ledger)]) == screen_ledger.EXIT_RUNTIME_ERROR


def test_empty_csv(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    ledger = _write(tmp_path / "ledger.csv", "Amount\n")

    assert screen_ledger.main([str(ledger)]) == screen_ledger.EXIT_CONFIG_ERROR
    assert "no rows" in capsys.readouterr().err


def test_report_without_api_key(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    ledger = _write(tmp_path / "ledger.csv", CSV_LEDGER)

    exit_code = screen_ledger.main([str(ledger), "--summary", "--report"])

    assert exit_code == screen_ledger.EXIT_OK
    assert "API Key is missing" in capsys.readouterr().out


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("42", 42), ("-3.5", -3.5), ("  ", None), ("1,200", "1,200"), ("INV-9", "INV-9")],
)
def test_coerce_cell(raw: str, expected) -> None:
    assert screen_ledger._coerce_cell(raw) == expected
