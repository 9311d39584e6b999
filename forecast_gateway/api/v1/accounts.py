"""GET /v1/accounts - list a customer's accounts from the bank provider"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from forecast_gateway.api.v1.schemas import AccountsResponse, AccountSchema
from forecast_gateway.api.dependencies import get_bank_client, get_request_id
from forecast_gateway.domain.exceptions import AccountNotFoundError, BankAPIError
from forecast_gateway.infrastructure.clients.bank import BankClient
from forecast_gateway.infrastructure.observability.metrics import bank_fetch_failures_counter

router = APIRouter()


@router.get("/accounts", response_model=AccountsResponse)
async def list_accounts(
    request: Request,
    customer_id: str = Query(..., min_length=1, description="Customer identifier"),
    bank_client: BankClient = Depends(get_bank_client),
):
    """
    Retrieve the accounts a customer can forecast.

    Returns:
        Account ids with their current balances
    """
    request_id = get_request_id(request)
    try:
        accounts = await bank_client.list_accounts(customer_id)
    except AccountNotFoundError:
        raise HTTPException(status_code=404, detail="Customer not found")
    except BankAPIError as e:
        bank_fetch_failures_counter.labels(resource="accounts").inc()
        logging.error(f"Bank API error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Bank service unavailable")

    return AccountsResponse(
        customer_id=customer_id,
        accounts=[AccountSchema.model_validate(a) for a in accounts],
    )
