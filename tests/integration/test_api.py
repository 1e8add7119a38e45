"""Integration tests for API endpoints"""

import pytest
from unittest.mock import AsyncMock, patch
from datetime import date
from fastapi.testclient import TestClient
from finance_tracker.domain.exceptions import ParseFailed
from finance_tracker.domain.models import ParsedExpense


@pytest.fixture
def company(client: TestClient) -> dict:
    response = client.post(
        "/v1/companies",
        json={"name": "Acme", "paymentType": "monthly", "expectedAmount": 10_000_000, "color": "#3b82f6"},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def weekly_company(client: TestClient) -> dict:
    response = client.post(
        "/v1/companies",
        json={"name": "Gig", "paymentType": "weekly", "paymentDay": 5, "expectedAmount": 1_000_000, "color": "#22c55e"},
    )
    assert response.status_code == 201
    return response.json()


def add_subscription(client: TestClient, name: str, billing_day: int, amount: int = 260_000) -> dict:
    response = client.post(
        "/v1/subscriptions",
        json={"name": name, "amount": amount, "billingDay": billing_day, "category": "Entertainment", "color": "#a855f7"},
    )
    assert response.status_code == 201
    return response.json()


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "finance_recurring_charges_total" in response.text


def test_request_id_header(client: TestClient):
    assert client.get("/health").headers["X-Request-ID"]
    assert client.get("/health", headers={"X-Request-ID": "abc-123"}).headers["X-Request-ID"] == "abc-123"


def test_company_crud(client: TestClient, company: dict):
    """Create, read, update, and delete a company over the camelCase wire format"""
    assert company["paymentType"] == "monthly"
    assert company["expectedAmount"] == 10_000_000

    fetched = client.get(f"/v1/companies/{company['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["name"] == "Acme"

    updated = client.patch(f"/v1/companies/{company['id']}", json={"expectedAmount": 12_000_000})
    assert updated.status_code == 200
    assert updated.json()["expectedAmount"] == 12_000_000
    assert updated.json()["name"] == "Acme"

    assert client.delete(f"/v1/companies/{company['id']}").status_code == 204
    assert client.get(f"/v1/companies/{company['id']}").status_code == 404


def test_record_not_found(client: TestClient):
    fake_uuid = "00000000-0000-0000-0000-000000000000"
    assert client.get(f"/v1/expenses/{fake_uuid}").status_code == 404
    assert client.patch(f"/v1/tasks/{fake_uuid}", json={"title": "x"}).status_code == 404


def test_weekly_company_payment_day_limited_to_weekdays(client: TestClient):
    response = client.post(
        "/v1/companies",
        json={"name": "Gig", "paymentType": "weekly", "paymentDay": 15, "expectedAmount": 1, "color": "#fff"},
    )
    assert response.status_code == 422


def test_payment_day_checked_against_stored_company(client: TestClient, weekly_company: dict):
    assert client.patch(f"/v1/companies/{weekly_company['id']}", json={"paymentDay": 20}).status_code == 422

    monthly = client.post(
        "/v1/companies",
        json={"name": "Globex", "paymentType": "monthly", "paymentDay": 25, "expectedAmount": 1, "color": "#fff"},
    ).json()
    assert client.patch(f"/v1/companies/{monthly['id']}", json={"paymentType": "weekly"}).status_code == 422

    assert client.get(f"/v1/companies/{weekly_company['id']}").json()["paymentDay"] == 5
    assert client.get(f"/v1/companies/{monthly['id']}").json()["paymentType"] == "monthly"


def test_unknown_company_reference_is_not_found(client: TestClient):
    fake_uuid = "00000000-0000-0000-0000-000000000000"

    income = client.post("/v1/incomes", json={"companyId": fake_uuid, "period": "2025-09", "amount": 1_000})
    task = client.post("/v1/tasks", json={"title": "Call", "color": "#fff", "companyId": fake_uuid})

    assert income.status_code == 404
    assert task.status_code == 404
    assert client.get("/v1/data").json()["incomes"] == []


@pytest.mark.parametrize("period", ["2025-13", "2025-W54", "September"])
def test_income_rejects_malformed_period(client: TestClient, company: dict, period: str):
    response = client.post(
        "/v1/incomes",
        json={"companyId": company["id"], "period": period, "amount": 1_000},
    )
    assert response.status_code == 422


def test_income_toggle_status(client: TestClient, weekly_company: dict):
    income = client.post(
        "/v1/incomes",
        json={"companyId": weekly_company["id"], "period": "2025-W37", "amount": 1_000_000},
    ).json()
    assert income["status"] == "pending"

    toggled = client.post(f"/v1/incomes/{income['id']}/toggle-status?asOf=2025-09-12")
    assert toggled.status_code == 200
    assert toggled.json()["status"] == "received"
    assert toggled.json()["receivedDate"] == "2025-09-12"


def test_deleting_company_cascades_to_incomes(client: TestClient, company: dict):
    client.post("/v1/incomes", json={"companyId": company["id"], "period": "2025-09", "amount": 1_000})

    client.delete(f"/v1/companies/{company['id']}")

    data = client.get("/v1/data").json()
    assert data["companies"] == []
    assert data["incomes"] == []


def test_dashboard(client: TestClient, company: dict, weekly_company: dict):
    """Expected income counts every week overlapping the month"""
    client.post("/v1/incomes", json={"companyId": company["id"], "period": "2025-09", "amount": 10_000_000, "status": "received"})
    client.post("/v1/incomes", json={"companyId": company["id"], "period": "2025-08", "amount": 10_000_000, "status": "received"})
    client.post("/v1/incomes", json={"companyId": weekly_company["id"], "period": "2025-W40", "amount": 1_000_000, "status": "received"})
    client.post("/v1/expenses", json={"category": "Food", "amount": 2_000_000, "description": "Groceries", "date": "2025-09-03"})
    add_subscription(client, "Netflix", 28)

    response = client.get("/v1/dashboard?asOf=2025-09-27")

    assert response.status_code == 200
    data = response.json()
    assert data["month"] == "2025-09"
    assert data["monthLabel"] == "September 2025"
    assert data["expected"] == 15_000_000
    assert data["received"] == 11_000_000
    assert data["spending"] == 2_000_000
    assert data["netSavings"] == 9_000_000
    assert data["comparison"] == {"diff": 5_000_000, "percentage": 50.0, "isPositive": True}
    assert len(data["trend"]) == 6
    assert data["trend"][-1]["isCurrent"] is True
    assert data["trend"][-1]["amountLabel"] == "11M"
    assert data["categories"]["categories"][0] == {"category": "Food", "amount": 2_000_000, "percentage": 100.0}
    assert [s["name"] for s in data["upcoming"]] == ["Netflix"]
    assert data["formatted"]["expected"] == "15.000.000đ"


def test_compensation(client: TestClient, company: dict, weekly_company: dict):
    client.post("/v1/incomes", json={"companyId": weekly_company["id"], "period": "2025-W40", "amount": 1_000_000, "paymentDate": "2025-10-03"})
    client.post("/v1/incomes", json={"companyId": weekly_company["id"], "period": "2025-W37", "amount": 1_000_000})

    response = client.get("/v1/compensation?month=2025-09")

    assert response.status_code == 200
    data = response.json()
    assert data["prevMonth"] == "2025-08"
    assert data["nextMonth"] == "2025-10"
    assert data["weeks"] == ["2025-W36", "2025-W37", "2025-W38", "2025-W39", "2025-W40"]
    assert data["expected"] == 15_000_000
    # The W40 income was paid in October, so only W37 shows here
    weekly = data["weeklyCompanies"][0]
    assert [i["period"] for i in weekly["incomes"]] == ["2025-W37"]
    assert data["monthlyCompanies"][0]["incomes"] == []


def test_compensation_invalid_month(client: TestClient):
    response = client.get("/v1/compensation?month=2025-13")
    assert response.status_code == 400


def test_compensation_defaults_to_as_of_month(client: TestClient):
    data = client.get("/v1/compensation?asOf=2025-09-15").json()

    assert data["month"] == "2025-09"
    assert data["prevMonth"] == "2025-08"


def test_spending_views(client: TestClient):
    client.post("/v1/expenses", json={"category": "Food", "amount": 45_000, "description": "Pho", "date": "2025-09-01"})
    client.post("/v1/expenses", json={"category": "Transport", "amount": 15_000, "description": "Bus", "date": "2025-09-03"})
    client.post("/v1/expenses", json={"category": "Food", "amount": 30_000, "description": "Coffee", "date": "2025-09-10"})

    week = client.get("/v1/spending?view=week&date=2025-09-03").json()
    assert (week["start"], week["end"]) == ("2025-09-01", "2025-09-07")
    assert [d["date"] for d in week["days"]] == ["2025-09-03", "2025-09-01"]
    assert week["summary"]["total"] == 60_000

    month = client.get("/v1/spending?view=month&date=2025-09-15").json()
    assert month["summary"]["total"] == 90_000
    assert month["summary"]["categories"][0]["category"] == "Food"

    day = client.get("/v1/spending?view=day&date=2025-09-02").json()
    assert day["days"] == []

    assert client.get("/v1/spending?view=year").status_code == 422


def test_spending_defaults_to_as_of_date(client: TestClient):
    data = client.get("/v1/spending?view=month&asOf=2025-09-15").json()

    assert (data["start"], data["end"]) == ("2025-09-01", "2025-09-30")


@patch("finance_tracker.infrastructure.clients.gemini.GeminiClient.parse_expense")
def test_parse_expense_records_it(mock_parse: AsyncMock, client: TestClient):
    """Test POST /v1/spending/parse stores the parsed expense with the typed text"""
    mock_parse.return_value = ParsedExpense(amount=45_000, category="Food", description="Pho", date=date(2025, 9, 20))

    response = client.post("/v1/spending/parse?asOf=2025-09-20", json={"input": "pho 45k"})

    assert response.status_code == 201
    data = response.json()
    assert data["amount"] == 45_000
    assert data["rawInput"] == "pho 45k"
    assert data["date"] == "2025-09-20"
    assert len(client.get("/v1/data").json()["expenses"]) == 1


@patch("finance_tracker.infrastructure.clients.gemini.GeminiClient.parse_expense")
def test_parse_expense_failure_echoes_input(mock_parse: AsyncMock, client: TestClient):
    mock_parse.side_effect = ParseFailed("Invalid amount", "pho")

    response = client.post("/v1/spending/parse", json={"input": "pho"})

    assert response.status_code == 422
    assert response.json() == {"detail": "Invalid amount", "input": "pho"}
    assert client.get("/v1/data").json()["expenses"] == []


def test_subscription_summary(client: TestClient):
    netflix = add_subscription(client, "Netflix", 15, amount=260_000)
    add_subscription(client, "Spotify", 1, amount=59_000)
    client.post(f"/v1/subscriptions/{netflix['id']}/toggle-active")

    data = client.get("/v1/subscriptions/summary").json()

    assert data["totalMonthly"] == 59_000
    assert data["activeCount"] == 1
    assert len(data["groups"]["Entertainment"]) == 2


def test_materialize_is_idempotent(client: TestClient):
    """Test POST /v1/subscriptions/materialize creates each month's charge once"""
    add_subscription(client, "Netflix", 15)
    add_subscription(client, "Cloud", 31)
    add_subscription(client, "Later", 25)

    first = client.post("/v1/subscriptions/materialize?asOf=2026-02-28")
    assert first.status_code == 200
    created = first.json()["created"]
    assert first.json()["month"] == "2026-02"
    assert sorted((e["description"], e["date"]) for e in created) == [
        ("Cloud", "2026-02-28"),
        ("Later", "2026-02-25"),
        ("Netflix", "2026-02-15"),
    ]
    assert all(e["rawInput"].startswith("[Auto] ") for e in created)
    assert {e["billingMonth"] for e in created} == {"2026-02"}

    second = client.post("/v1/subscriptions/materialize?asOf=2026-02-28")
    assert second.json()["created"] == []
    assert len(client.get("/v1/data").json()["expenses"]) == 3


def test_charge_moved_out_of_month_is_rematerialized(client: TestClient):
    add_subscription(client, "Netflix", 10)
    charge = client.post("/v1/subscriptions/materialize?asOf=2026-10-10").json()["created"][0]

    moved = client.patch(f"/v1/expenses/{charge['id']}", json={"date": "2026-09-05"})
    assert moved.status_code == 200
    assert moved.json()["billingMonth"] == "2026-09"

    again = client.post("/v1/subscriptions/materialize?asOf=2026-10-10").json()["created"]
    assert [(e["description"], e["date"]) for e in again] == [("Netflix", "2026-10-10")]


def test_task_board_and_move(client: TestClient):
    first = client.post("/v1/tasks", json={"title": "Send invoice", "color": "#fff"}).json()
    second = client.post("/v1/tasks", json={"title": "File taxes", "priority": "high", "color": "#fff"}).json()
    assert (first["status"], first["sortOrder"], second["sortOrder"]) == ("new", 0, 1)

    moved = client.post(f"/v1/tasks/{first['id']}/move", json={"status": "in_progress", "sortOrder": 0})
    assert moved.status_code == 200

    board = client.get("/v1/tasks/board").json()
    assert [t["title"] for t in board["new"]] == ["File taxes"]
    assert [t["title"] for t in board["inProgress"]] == ["Send invoice"]
    assert board["completed"] == []
