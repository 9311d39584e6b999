"""Integration tests for API endpoints"""

import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from forecast_gateway.domain.exceptions import AccountNotFoundError, BankAPIError
from forecast_gateway.domain.models import Account

BANK = "forecast_gateway.infrastructure.clients.bank.BankClient"


@pytest.fixture
def purchases():
    """Provider purchase records, one of them unusable"""
    return [
        {"_id": "p1", "amount": 200, "purchase_date": "2024-01-05", "description": "Best Buy"},
        {"_id": "p2", "purchase_amount": 12.99, "purchase_date": "2024-01-06", "description": "Netflix"},
        {"_id": "p3", "purchase_date": "2024-01-07", "description": "No amount here"},
    ]


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "forecast_runs_total" in response.text


def test_request_id_header_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


@patch(f"{BANK}.list_bills")
@patch(f"{BANK}.list_deposits")
@patch(f"{BANK}.list_purchases")
@patch(f"{BANK}.get_account")
def test_forecast_endpoint_overdraft(
    mock_account: AsyncMock,
    mock_purchases: AsyncMock,
    mock_deposits: AsyncMock,
    mock_bills: AsyncMock,
    client: TestClient,
    purchases: list,
):
    """Test POST /v1/forecast on an account that dips below zero"""
    mock_account.return_value = Account(account_id="acc_1", balance=100, customer_id="c1")
    mock_purchases.return_value = purchases
    mock_deposits.return_value = []
    mock_bills.return_value = [{"payment_amount": 50, "payment_date": "2024-01-20", "payee": "Georgia Power"}]

    response = client.post("/v1/forecast", json={"account_id": "acc_1", "start_date": "2024-01-01"})

    assert response.status_code == 200
    data = response.json()
    assert data["account_id"] == "acc_1"
    assert len(data["projection"]) == 30
    assert data["projection"][4] == {"date": "2024-01-05", "balance": -100.0}
    assert data["risk"] == {"from": "2024-01-05", "to": "2024-01-30", "min": -162.99}
    assert data["summary"] == {"start": 100.0, "inflows": 0.0, "outflows": 262.99, "end": -162.99}
    assert data["tips"][0]["action"] == "apply-plan"
    assert [c["category"] for c in data["categories"]] == ["Shopping", "Subscriptions", "Utilities"]
    assert data["upcoming_bills"][0]["is_bill"] is True
    mock_bills.assert_awaited_once_with("c1")


@patch(f"{BANK}.list_bills")
@patch(f"{BANK}.list_deposits")
@patch(f"{BANK}.list_purchases")
@patch(f"{BANK}.get_account")
def test_forecast_endpoint_degrades_when_events_unavailable(
    mock_account: AsyncMock,
    mock_purchases: AsyncMock,
    mock_deposits: AsyncMock,
    mock_bills: AsyncMock,
    client: TestClient,
):
    """Event fetch failures become empty lists; a missing balance falls back to $1000"""
    mock_account.return_value = Account(account_id="acc_2", balance=None, customer_id="c2")
    mock_purchases.side_effect = BankAPIError("Bank API error: 500", status_code=500)
    mock_deposits.return_value = []
    mock_bills.side_effect = BankAPIError("Bank API timeout after 5.0s")

    response = client.post("/v1/forecast", json={"account_id": "acc_2", "horizon_days": 7})

    assert response.status_code == 200
    data = response.json()
    assert len(data["projection"]) == 7
    assert all(p["balance"] == 1000.0 for p in data["projection"])
    assert data["risk"] is None
    assert data["tips"] == []


@patch(f"{BANK}.get_account")
def test_forecast_endpoint_account_not_found(mock_account: AsyncMock, client: TestClient):
    mock_account.side_effect = AccountNotFoundError("no such account", status_code=404)

    response = client.post("/v1/forecast", json={"account_id": "missing"})

    assert response.status_code == 404
    assert response.json() == {"detail": "Account not found"}


@patch(f"{BANK}.get_account")
def test_forecast_endpoint_bank_unavailable(mock_account: AsyncMock, client: TestClient):
    mock_account.side_effect = BankAPIError("Bank API unreachable")

    response = client.post("/v1/forecast", json={"account_id": "acc_1"})

    assert response.status_code == 503


def test_forecast_endpoint_validates_request(client: TestClient):
    assert client.post("/v1/forecast", json={"account_id": ""}).status_code == 422
    assert client.post("/v1/forecast", json={"account_id": "a", "horizon_days": -1}).status_code == 422


def test_simulate_endpoint(client: TestClient):
    """Test POST /v1/forecast/simulate with caller-held events"""
    response = client.post(
        "/v1/forecast/simulate",
        json={
            "starting_balance": 1000,
            "start_date": "2024-01-01",
            "horizon_days": 31,
            "events": [
                {"amount": 2000, "date": "2024-01-15", "kind": "income", "description": "Payroll"},
                {"amount": 300, "date": "2024-01-20", "description": "Corner Restaurant"},
                {"amount": 99, "date": "someday", "description": "Ignored"},
            ],
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["account_id"] is None
    assert data["summary"]["end"] == 2700.0
    assert data["outlook"] == "sunny"
    assert [t["title"] for t in data["tips"]] == ["Auto-save $150 now", "Trim Dining by $60 this month"]


def test_categorize_endpoint(client: TestClient):
    response = client.post(
        "/v1/categorize",
        json={"texts": ["UBER EATS DELIVERY", "Uber Technologies Inc", "Kroger", "???"]},
    )

    assert response.status_code == 200
    assert response.json()["labels"] == ["Transportation", "Transportation", "Groceries", "Other"]


def test_categorize_endpoint_lite(client: TestClient):
    response = client.post("/v1/categorize", json={"texts": ["Rent"], "taxonomy": "lite"})
    assert response.json()["labels"] == ["Rent"]


def test_plan_apply_endpoint_is_idempotent(client: TestClient):
    """Test POST /v1/plan/apply returns new bills plus the undo snapshot"""
    bills = [
        {"amount": 1200, "date": "2024-01-01", "description": "Rent", "is_bill": True},
        {"amount": 15, "date": "2024-01-03", "description": "Netflix", "is_bill": True},
    ]

    first = client.post("/v1/plan/apply", json={"bills": bills}).json()

    assert first["changed"] is True
    assert [(b["description"], b["amount"], b["date"]) for b in first["bills"]] == [
        ("Rent", 600.0, "2024-01-01"),
        ("Rent", 600.0, "2024-01-08"),
        ("Netflix", 15.0, "2024-01-10"),
    ]
    assert [b["amount"] for b in first["previous_bills"]] == [1200.0, 15.0]

    second = client.post("/v1/plan/apply", json={"bills": first["bills"]}).json()

    assert second["changed"] is False
    assert second["bills"] == first["bills"]


def test_plan_delay_and_split_endpoints(client: TestClient):
    bills = [{"amount": 100, "date": "2024-01-30", "description": "Water", "is_bill": True}]

    delayed = client.post("/v1/plan/delay", json={"bills": bills, "index": 0}).json()
    split = client.post("/v1/plan/split", json={"bills": bills, "index": 0}).json()

    assert delayed["bills"][0]["date"] == "2024-02-06"
    assert [(b["amount"], b["date"]) for b in split["bills"]] == [(50.0, "2024-01-30"), (50.0, "2024-02-06")]


def test_plan_action_bad_index(client: TestClient):
    response = client.post("/v1/plan/split", json={"bills": [], "index": 0})
    assert response.status_code == 422


@patch(f"{BANK}.list_accounts")
def test_accounts_endpoint(mock_accounts: AsyncMock, client: TestClient):
    mock_accounts.return_value = [Account(account_id="acc_1", balance=10.0, customer_id="c1", nickname="Main")]

    response = client.get("/v1/accounts?customer_id=c1")

    assert response.status_code == 200
    assert response.json()["accounts"][0]["account_id"] == "acc_1"
