"""Map heterogeneous provider records onto the canonical CashFlowEvent"""

import logging
import math
from typing import Any, Dict, Iterable, List, Optional

from forecast_gateway.domain.exceptions import InvalidEventDataError
from forecast_gateway.domain.models import EXPENSE, INCOME, Account, CashFlowEvent
from forecast_gateway.utils.date_utils import parse_calendar_day

logger = logging.getLogger(__name__)

AMOUNT_FIELDS = ("amount", "purchase_amount", "payment_amount")
DATE_FIELDS = ("purchase_date", "transaction_date", "payment_date", "upcoming_payment_date", "date")
DESCRIPTION_FIELDS = ("description", "merchant", "payee", "nickname")
KIND_FIELDS = ("type", "kind")
ID_FIELDS = ("_id", "id")

KIND_ALIASES = {
    "income": INCOME,
    "deposit": INCOME,
    "credit": INCOME,
    "expense": EXPENSE,
    "purchase": EXPENSE,
    "withdrawal": EXPENSE,
    "debit": EXPENSE,
    "bill": EXPENSE,
    "merchant": EXPENSE,
}

# Transfers carry no direction of their own; the endpoint they came from decides
DIRECTIONLESS_KINDS = ("p2p", "transfer")


def _first_present(record: Dict[str, Any], fields: Iterable[str]) -> Optional[Any]:
    for name in fields:
        value = record.get(name)
        if value is not None and value != "":
            return value
    return None


def _parse_amount(raw: Any) -> float:
    if isinstance(raw, bool):
        raise InvalidEventDataError(f"Amount is not numeric: {raw!r}")
    try:
        amount = float(raw)
    except (TypeError, ValueError) as e:
        raise InvalidEventDataError(f"Amount is not numeric: {raw!r}") from e
    if not math.isfinite(amount) or amount < 0:
        raise InvalidEventDataError(f"Amount must be a non-negative number: {raw!r}")
    return amount


def normalize_event(
    record: Dict[str, Any],
    default_kind: str = EXPENSE,
    is_bill: bool = False,
) -> CashFlowEvent:
    """
    Convert one provider record into a CashFlowEvent.

    Accepts the field spellings the provider is known to use (e.g.
    `purchase_amount` vs `amount`, `purchase_date` vs `payment_date`).
    Datetime strings are cut to their calendar day.

    Raises:
        InvalidEventDataError: if the record is not a mapping, has no usable
            amount or date, or names an unknown kind
    """
    if not isinstance(record, dict):
        raise InvalidEventDataError(f"Expected an object, got {type(record).__name__}")

    raw_amount = _first_present(record, AMOUNT_FIELDS)
    if raw_amount is None:
        raise InvalidEventDataError("Record has no amount field")
    amount = _parse_amount(raw_amount)

    raw_date = _first_present(record, DATE_FIELDS)
    day = str(raw_date)[:10] if raw_date is not None else None
    if parse_calendar_day(day) is None:
        raise InvalidEventDataError(f"Record has no calendar-day date: {raw_date!r}")

    raw_kind = _first_present(record, KIND_FIELDS)
    if raw_kind is None or str(raw_kind).lower() in DIRECTIONLESS_KINDS:
        kind = default_kind
    else:
        kind = KIND_ALIASES.get(str(raw_kind).lower())
        if kind is None:
            raise InvalidEventDataError(f"Unknown event kind: {raw_kind!r}")

    description = _first_present(record, DESCRIPTION_FIELDS)
    raw_id = _first_present(record, ID_FIELDS)

    return CashFlowEvent(
        amount=amount,
        date=day,
        kind=kind,
        description=str(description) if description is not None else "",
        is_bill=bool(record.get("isBill", record.get("is_bill", is_bill))),
        event_id=str(raw_id) if raw_id is not None else None,
    )


def normalize_events(
    records: Iterable[Any],
    default_kind: str = EXPENSE,
    is_bill: bool = False,
) -> List[CashFlowEvent]:
    """Normalize a batch of records, dropping (and logging) the ones that don't fit"""
    events = []
    for record in records:
        try:
            events.append(normalize_event(record, default_kind=default_kind, is_bill=is_bill))
        except InvalidEventDataError as e:
            logger.warning(f"Rejected provider record: {e}")
    return events


def normalize_account(record: Dict[str, Any]) -> Account:
    """
    Convert a provider account record into an Account.

    A missing or non-numeric balance is kept as None so the caller can apply
    its documented fallback.

    Raises:
        InvalidEventDataError: if the record carries no account id
    """
    if not isinstance(record, dict):
        raise InvalidEventDataError(f"Expected an account object, got {type(record).__name__}")

    account_id = _first_present(record, ID_FIELDS)
    if account_id is None:
        raise InvalidEventDataError("Account record has no id")

    balance = record.get("balance")
    try:
        balance = float(balance) if balance is not None and not isinstance(balance, bool) else None
    except (TypeError, ValueError):
        balance = None
    if balance is not None and not math.isfinite(balance):
        balance = None

    customer_id = record.get("customer_id", record.get("customerId"))
    return Account(
        account_id=str(account_id),
        balance=balance,
        customer_id=str(customer_id) if customer_id is not None else None,
        nickname=record.get("nickname"),
    )
