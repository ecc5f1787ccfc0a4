"""Pytest configuration shared across the suite."""

import pytest


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def expense_rows() -> list[dict]:
    """Small expense log with one exact duplicate, one negative and one blank amount."""
    return [
        {"Invoice No": "INV-1001", "Vendor": "Acme", "Employee": "Ann", "Posted Date": "2024-03-01T09:15:00", "Amount": 120.5},
        {"Invoice No": "INV-1002", "Vendor": "Acme", "Employee": "Bob", "Posted Date": "2024-03-02T10:00:00", "Amount": 99.0},
        {"Invoice No": "INV-1003", "Vendor": "Globex", "Employee": "Ann", "Posted Date": "2024-03-03T11:30:00", "Amount": 240.0},
        {"Invoice No": "INV-1003", "Vendor": "Globex", "Employee": "Ann", "Posted Date": "2024-03-03T11:30:00", "Amount": 240.0},
        {"Invoice No": "INV-1004", "Vendor": "Initech", "Employee": "Cid", "Posted Date": "2024-03-05T14:45:00", "Amount": -75.25},
        {"Invoice No": "INV-1005", "Vendor": "Acme", "Employee": "Bob", "Posted Date": "2024-03-06T16:00:00", "Amount": None},
        {"Invoice No": "INV-1006", "Vendor": "Globex", "Employee": "Cid", "Posted Date": "2024-03-08T08:05:00", "Amount": 310.0},
        {"Invoice No": "INV-1007", "Vendor": "Initech", "Employee": "Ann", "Posted Date": "2024-03-09T09:40:00", "Amount": 15000.0},
    ]
