"""POST /v1/plan/* - stay-positive plan and manual bill actions"""

import logging
from fastapi import APIRouter, HTTPException

from forecast_gateway.api.v1.schemas import BillActionRequest, CashFlowEventSchema, PlanRequest, PlanResponse
from forecast_gateway.domain.plan import apply_stay_positive_plan, delay_bill, split_bill
from forecast_gateway.infrastructure.observability.metrics import record_plan

router = APIRouter()


def _plan_response(previous: list, updated: list) -> PlanResponse:
    return PlanResponse(
        bills=[CashFlowEventSchema.model_validate(b) for b in updated],
        previous_bills=[CashFlowEventSchema.model_validate(b) for b in previous],
        changed=sorted(previous, key=lambda b: b.date) != updated,
    )


@router.post("/plan/apply", response_model=PlanResponse)
def apply_plan(request_body: PlanRequest):
    """
    Apply the stay-positive plan to the caller's bills.

    Returns the new bills and the submitted ones as `previous_bills`; undo is
    the caller restoring that snapshot. Submitting an already-planned list
    returns it unchanged.
    """
    bills = [b.to_domain() for b in request_body.bills]
    updated = apply_stay_positive_plan(bills)
    response = _plan_response(bills, updated)
    record_plan(response.changed)
    return response


@router.post("/plan/delay", response_model=PlanResponse)
def delay(request_body: BillActionRequest):
    """Push one bill back a week"""
    bills = [b.to_domain() for b in request_body.bills]
    try:
        updated = delay_bill(bills, request_body.index)
    except IndexError:
        raise HTTPException(status_code=422, detail="Bill index out of range")
    except ValueError as e:
        logging.warning(f"Cannot delay bill: {e}")
        raise HTTPException(status_code=422, detail="Bill has no valid date")
    return _plan_response(bills, updated)


@router.post("/plan/split", response_model=PlanResponse)
def split(request_body: BillActionRequest):
    """Split one bill into two halves a week apart"""
    bills = [b.to_domain() for b in request_body.bills]
    try:
        updated = split_bill(bills, request_body.index)
    except IndexError:
        raise HTTPException(status_code=422, detail="Bill index out of range")
    except ValueError as e:
        logging.warning(f"Cannot split bill: {e}")
        raise HTTPException(status_code=422, detail="Bill has no valid date")
    return _plan_response(bills, updated)
