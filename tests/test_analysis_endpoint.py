try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import httpx
import pytest

from app.main import app
from app.services.screening import ScreeningService


class StubReportService:
    def __init__(self) -> None:
        self.results = []

    async def generate(self, result) -> str:
        self.results.append(result)
        return f"Risk score {result.risk_score} ({result.risk_level})"


pytestmark = pytest.mark.anyio("asyncio")


@pytest.fixture()
def overrides():
    from app import dependencies

    reports = StubReportService()

    app.dependency_overrides.clear()
    app.dependency_overrides.update(
        {
            dependencies.get_screening_service: lambda: ScreeningService(),
            dependencies.get_fraud_report_service: lambda: reports,
            dependencies.get_row_limit: lambda: 20,
        }
    )

    yield reports

    app.dependency_overrides.clear()


@pytest.fixture()
async def client(overrides):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    ) as test_client:
        yield test_client


async def test_health(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_columns_suggests_roles(client, expense_rows):
    response = await client.post("/api/columns", json={"rows": expense_rows})

    assert response.status_code == 200
    body = response.json()
    assert "Amount" in body["numeric"]
    assert "Posted Date" in body["date"]
    assert body["suggestedConfig"] == {
        "amountColumn": "Amount",
        "dateColumn": "Posted Date",
        "categoryColumn": "Vendor",
        "sourceColumn": "Employee",
        "invoiceColumn": "Invoice No",
    }


async def test_columns_without_rows(client):
    response = await client.post("/api/columns", json={"rows": []})
    assert response.status_code == 200
    assert response.json()["suggestedConfig"] is None


async def test_analysis_auto_detects_columns(client, expense_rows):
    response = await client.post("/api/analysis", json={"rows": expense_rows})

    assert response.status_code == 200
    body = response.json()
    assert body["columnName"] == "Amount"
    assert body["categoryColumnName"] == "Vendor"
    assert body["riskScore"] == 100
    assert body["riskLevel"] == "Critical"
    assert [item["rowIndex"] for item in body["anomalies"]] == [3, 4, 5, 6, 8]
    assert body["stats"]["riskBreakdown"]["duplicates"] == 240.0


async def test_analysis_with_manual_config(client, expense_rows):
    payload = {"rows": expense_rows, "config": {"amountColumn": "Amount"}}
    response = await client.post("/api/analysis", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["categoryColumnName"] is None
    assert body["entityData"] == []
    assert body["heatmapData"] == []


async def test_analysis_rejects_unknown_manual_column(client, expense_rows):
    payload = {"rows": expense_rows, "config": {"amountColumn": "Total"}}
    response = await client.post("/api/analysis", json=payload)

    assert response.status_code == 422
    assert response.json()["detail"] == "Amount column 'Total' does not exist in the dataset."


async def test_analysis_requires_rows(client):
    response = await client.post("/api/analysis", json={"rows": []})
    assert response.status_code == 400


async def test_analysis_requires_numeric_column(client):
    rows = [{"Vendor": "Acme", "Memo": "lunch"}, {"Vendor": "Globex", "Memo": "taxi"}]
    response = await client.post("/api/analysis", json={"rows": rows})

    assert response.status_code == 400
    assert "No numeric columns" in response.json()["detail"]


async def test_analysis_enforces_row_limit(client):
    rows = [{"Amount": index} for index in range(21)]
    response = await client.post("/api/analysis", json={"rows": rows})
    assert response.status_code == 413


async def test_report_endpoint_returns_narrative(client, overrides, expense_rows):
    response = await client.post("/api/analysis/report", json={"rows": expense_rows})

    assert response.status_code == 200
    body = response.json()
    assert body["report"] == "Risk score 100 (Critical)"
    assert body["analysis"]["validRows"] == 7
    assert len(overrides.results) == 1


async def test_analysis_treats_infinite_amounts_as_missing(client):
    rows = [{"Amount": 10}, {"Amount": 12}, {"Amount": "Infinity"}]
    response = await client.post("/api/analysis", json={"rows": rows})

    assert response.status_code == 200
    body = response.json()
    assert body["validRows"] == 2
    assert body["stats"]["averageAmount"] == 11.0
    assert body["stats"]["missingCount"] == 1
    assert all(point["zScore"] is not None for point in body["scatterData"])
