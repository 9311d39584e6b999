"""Pytest fixtures for testing"""

import pytest
from fastapi.testclient import TestClient
from forecast_gateway.api.main import create_app
from forecast_gateway.domain.models import CashFlowEvent


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def sample_events() -> list[CashFlowEvent]:
    """A month of mixed income, purchases and bills starting 2024-01-01"""
    return [
        CashFlowEvent(amount=1200, date="2024-01-01", description="Rent", is_bill=True),
        CashFlowEvent(amount=15, date="2024-01-03", description="Netflix", is_bill=True),
        CashFlowEvent(amount=85.40, date="2024-01-04", description="Kroger"),
        CashFlowEvent(amount=2500, date="2024-01-15", kind="income", description="Payroll"),
        CashFlowEvent(amount=32.10, date="2024-01-18", description="Chipotle"),
        CashFlowEvent(amount=60, date="2024-01-20", description="Comcast Cable", is_bill=True),
    ]
