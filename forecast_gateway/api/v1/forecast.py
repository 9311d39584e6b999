"""POST /v1/forecast - account cash forecast endpoints"""

import time
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request

from forecast_gateway.api.v1.schemas import ForecastRequest, ForecastResponse, SimulateRequest
from forecast_gateway.api.dependencies import get_bank_client, get_request_id
from forecast_gateway.config import settings
from forecast_gateway.domain.exceptions import AccountNotFoundError, BankAPIError
from forecast_gateway.domain.forecasting import run_forecast
from forecast_gateway.domain.models import INCOME, Account, CashFlowEvent
from forecast_gateway.infrastructure.clients.bank import BankClient
from forecast_gateway.infrastructure.clients.normalize import normalize_events
from forecast_gateway.infrastructure.observability.metrics import record_forecast, bank_fetch_failures_counter
from forecast_gateway.infrastructure.observability.logging import log_forecast

router = APIRouter()


async def _fetch_or_empty(resource: str, fetch, request_id: str) -> list:
    """Run one provider fetch, degrading to an empty list when the provider fails"""
    try:
        return await fetch
    except BankAPIError as e:
        bank_fetch_failures_counter.labels(resource=resource).inc()
        logging.warning(f"Bank {resource} unavailable, continuing without them: {e}", extra={"request_id": request_id})
        return []


async def load_account_events(bank_client: BankClient, account: Account, request_id: str) -> List[CashFlowEvent]:
    """Collect purchases, deposits and bills for an account as canonical events"""
    purchases = await _fetch_or_empty("purchases", bank_client.list_purchases(account.account_id), request_id)
    deposits = await _fetch_or_empty("deposits", bank_client.list_deposits(account.account_id), request_id)
    bills = []
    if account.customer_id:
        bills = await _fetch_or_empty("bills", bank_client.list_bills(account.customer_id), request_id)

    return (
        normalize_events(purchases)
        + normalize_events(deposits, default_kind=INCOME)
        + normalize_events(bills, is_bill=True)
    )


@router.post("/forecast", response_model=ForecastResponse)
async def create_forecast(
    request_body: ForecastRequest,
    request: Request,
    bank_client: BankClient = Depends(get_bank_client),
):
    """
    Project an account's balance and coach on the result.

    Flow:
    1. Fetch the account (404 if unknown, 503 if the provider is down)
    2. Fetch purchases, deposits and bills; any that fail count as empty
    3. Normalize provider records into cash-flow events
    4. Run the forecast pipeline
    5. Record metrics and logs, return the result
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        account = await bank_client.get_account(request_body.account_id)
    except AccountNotFoundError:
        bank_fetch_failures_counter.labels(resource="account").inc()
        logging.warning(f"Account not found: {request_body.account_id}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Account not found")
    except BankAPIError as e:
        bank_fetch_failures_counter.labels(resource="account").inc()
        logging.error(f"Bank API error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Bank service unavailable")

    try:
        events = await load_account_events(bank_client, account, request_id)

        starting_balance = account.balance
        if starting_balance is None:
            logging.warning(
                f"Account {account.account_id} has no usable balance, using fallback",
                extra={"request_id": request_id},
            )
            starting_balance = settings.fallback_starting_balance

        result = run_forecast(
            starting_balance,
            events,
            horizon_days=request_body.horizon_days,
            daily_drift=request_body.daily_drift,
            start_date=request_body.start_date,
            clamp_at_zero=request_body.clamp_at_zero,
            taxonomy=request_body.taxonomy,
        )

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_forecast(result)
    log_forecast(
        request_id,
        account.account_id,
        request_body.horizon_days,
        result.risk is not None,
        len(result.tips),
        len(events),
        duration_ms,
    )

    return ForecastResponse.from_result(result, account_id=account.account_id)


@router.post("/forecast/simulate", response_model=ForecastResponse)
def simulate_forecast(request_body: SimulateRequest):
    """
    Run the forecast pipeline on caller-supplied events.

    Used to re-project after a plan has been applied to the caller's bills.
    Events with malformed dates are ignored rather than rejected.
    """
    result = run_forecast(
        request_body.starting_balance,
        [e.to_domain() for e in request_body.events],
        horizon_days=request_body.horizon_days,
        daily_drift=request_body.daily_drift,
        start_date=request_body.start_date,
        clamp_at_zero=request_body.clamp_at_zero,
        taxonomy=request_body.taxonomy,
    )
    record_forecast(result)
    return ForecastResponse.from_result(result)
