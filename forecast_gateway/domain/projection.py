"""Balance projection, overdraft risk detection and flow summary"""

from datetime import date
from typing import Dict, List, Optional

from forecast_gateway.domain.models import (
    CashFlowEvent,
    ProjectionPoint,
    RiskWindow,
    Summary,
    has_valid_amount,
)
from forecast_gateway.utils.date_utils import generate_date_range, parse_calendar_day


def build_daily_net(events: List[CashFlowEvent]) -> Dict[str, float]:
    """Net signed amount per calendar day; events with a bad date or amount are left out"""
    net_by_date: Dict[str, float] = {}
    for event in events:
        if parse_calendar_day(event.date) is None or not has_valid_amount(event):
            continue
        net_by_date[event.date] = net_by_date.get(event.date, 0.0) + event.signed_amount
    return net_by_date


def project_balances(
    start_balance: float,
    events: List[CashFlowEvent],
    start_date: date | None = None,
    horizon_days: int = 30,
    daily_drift: float = 0.0,
    clamp_at_zero: bool = False,
) -> List[ProjectionPoint]:
    """
    Walk the horizon one calendar day at a time and record the running balance.

    Each day first loses `daily_drift` (flat baseline spend, 0 when events
    carry the full picture) and then gains the day's net event amount.

    Balances may go negative unless `clamp_at_zero` is set; the risk
    detector relies on seeing those dips, so clamping is opt-in only.

    Returns:
        Exactly max(horizon_days, 0) points on consecutive days, balances
        rounded to cents
    """
    if start_date is None:
        start_date = date.today()

    net_by_date = build_daily_net(events)
    balance = float(start_balance)
    points = []

    for day in generate_date_range(start_date, horizon_days):
        key = day.isoformat()
        balance = balance - daily_drift + net_by_date.get(key, 0.0)
        if clamp_at_zero:
            balance = max(0.0, balance)
        points.append(ProjectionPoint(date=key, balance=round(balance, 2)))

    return points


def detect_risk(points: List[ProjectionPoint]) -> Optional[RiskWindow]:
    """
    Report the overdraft window of a projection.

    The window runs from the first negative day to the last negative day, as
    one span even if the balance recovers in between. `min_balance` is the
    lowest balance of the whole projection.
    """
    negative = [p for p in points if p.balance < 0]
    if not negative:
        return None

    return RiskWindow(
        start=negative[0].date,
        end=negative[-1].date,
        min_balance=min(p.balance for p in points),
    )


def summarize(
    events: List[CashFlowEvent],
    start_balance: float,
    projection: List[ProjectionPoint],
) -> Summary:
    """Inflow/outflow totals over the events used for the run, plus start and end balance"""
    usable = [e for e in events if has_valid_amount(e)]
    inflows = sum(e.amount for e in usable if e.is_income)
    outflows = sum(e.amount for e in usable if not e.is_income)
    end = projection[-1].balance if projection else start_balance

    return Summary(
        start=round(float(start_balance), 2),
        inflows=round(inflows, 2),
        outflows=round(outflows, 2),
        end=round(float(end), 2),
    )
