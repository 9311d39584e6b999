"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from forecast_gateway.config import settings
from forecast_gateway.infrastructure.clients.bank import BankClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_bank_client() -> BankClient:
    """Provide Bank API client configured from settings"""
    return BankClient(
        base_url=settings.bank_api_base,
        api_key=settings.bank_api_key,
        mode=settings.bank_mode,
        timeout=settings.http_timeout_seconds,
    )
