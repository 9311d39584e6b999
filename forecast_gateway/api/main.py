"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from forecast_gateway.api.dependencies import get_bank_client
from forecast_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from forecast_gateway.api.v1 import accounts, categorize, forecast, plan
from forecast_gateway.config import settings
from forecast_gateway.infrastructure.clients.bank import BankClient
from forecast_gateway.infrastructure.observability.logging import setup_logging

setup_logging(settings.log_level)

V1_ROUTERS = (
    (forecast.router, "forecasts"),
    (plan.router, "plans"),
    (categorize.router, "categories"),
    (accounts.router, "accounts"),
)


def create_app(bank_client: BankClient | None = None) -> FastAPI:
    """
    Build the forecast gateway.

    Args:
        bank_client: Provider client shared by every request. When omitted,
            each request gets a client built from settings.
    """
    app = FastAPI(
        title="Cash Forecast Gateway",
        description="Balance projection, spending categories and cash coaching",
        version="0.1.0",
    )

    # Last added runs first, so request IDs exist before metrics are taken
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    if bank_client is not None:
        app.dependency_overrides[get_bank_client] = lambda: bank_client

    bank_mode = bank_client.mode if bank_client is not None else settings.bank_mode

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name, "bank_mode": bank_mode}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for router, tag in V1_ROUTERS:
        app.include_router(router, prefix="/v1", tags=[tag])

    return app


app = create_app()
