"""Forecast pipeline - single entry point tying projection, categories and coaching together"""

import logging
from datetime import date
from typing import List

from forecast_gateway.domain.categories import TAXONOMIES, rollup_categories, tag_categories
from forecast_gateway.domain.coach import advise, cash_outlook
from forecast_gateway.domain.models import CashFlowEvent, ForecastResult, has_valid_amount
from forecast_gateway.domain.projection import detect_risk, project_balances, summarize
from forecast_gateway.utils.date_utils import parse_calendar_day

logger = logging.getLogger(__name__)


def usable_events(events: List[CashFlowEvent]) -> List[CashFlowEvent]:
    """Keep events with a calendar-day date and a non-negative finite amount"""
    return [e for e in events if parse_calendar_day(e.date) is not None and has_valid_amount(e)]


def run_forecast(
    starting_balance: float,
    events: List[CashFlowEvent],
    horizon_days: int = 30,
    daily_drift: float = 0.0,
    start_date: date | None = None,
    clamp_at_zero: bool = False,
    taxonomy: str = "full",
) -> ForecastResult:
    """
    Main entry point: project balances and derive categories, risk, summary and tips.

    Malformed events are dropped rather than failing the run. An empty event
    list or a zero horizon still yields a well-formed result.

    Raises:
        ValueError: if taxonomy is not a known rule set
    """
    if taxonomy not in TAXONOMIES:
        raise ValueError(f"Unknown taxonomy: {taxonomy!r}")
    if start_date is None:
        start_date = date.today()

    clean = usable_events(events)
    if len(clean) != len(events):
        logger.debug("Dropped %d malformed events", len(events) - len(clean))

    spending = tag_categories([e for e in clean if not e.is_income], taxonomy)
    categories = rollup_categories(spending)

    projection = project_balances(
        starting_balance,
        clean,
        start_date=start_date,
        horizon_days=horizon_days,
        daily_drift=daily_drift,
        clamp_at_zero=clamp_at_zero,
    )
    risk = detect_risk(projection)
    summary = summarize(clean, starting_balance, projection)
    tips = advise(projection, clean, summary)

    horizon_start = start_date.isoformat()
    upcoming_bills = sorted(
        (e for e in clean if e.is_bill and e.date >= horizon_start),
        key=lambda e: e.date,
    )

    return ForecastResult(
        projection=projection,
        categories=categories,
        risk=risk,
        summary=summary,
        tips=tips,
        upcoming_bills=upcoming_bills,
        outlook=cash_outlook(summary),
    )
