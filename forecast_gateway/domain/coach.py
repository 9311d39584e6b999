"""Cash coach - rule-based tips over a projected balance series"""

import math
import re
from typing import Dict, List, Optional

from forecast_gateway.domain.models import (
    CashFlowEvent,
    CoachTip,
    ProjectionPoint,
    Summary,
    has_valid_amount,
)

MAX_TIPS = 3
OVERDRAFT_HORIZON_DAYS = 14
MAX_SUBSCRIPTION_TIPS = 2
TRIM_SHARE = 0.2
MIN_TRIM = 10
AUTO_SAVE_THRESHOLD = 500
AUTO_SAVE_CAP = 150
MIN_AUTO_SAVE = 50

SUBSCRIPTION_PATTERN = re.compile(r"netflix|spotify|hulu|prime|subscription", re.IGNORECASE)

# Coarse buckets for the trim rule, intentionally separate from categorize()
COARSE_CATEGORY_KEYWORDS = [
    ("Subscriptions", ("netflix", "spotify", "subscription")),
    ("Transport", ("uber", "bus", "gas")),
    ("Groceries", ("grocery", "market")),
    ("Housing", ("rent",)),
    ("Utilities", ("util",)),
    ("Dining", ("coffee", "restaurant", "dining", "fast")),
]


def money(value: float) -> str:
    """Whole-dollar USD string, e.g. 1200 -> "$1,200" and -99.6 -> "-$100" """
    dollars = round_half_up(abs(value))
    sign = "-" if value < 0 and dollars else ""
    return f"{sign}${dollars:,}"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def coarse_category(description: str) -> str:
    text = (description or "").lower()
    for label, keywords in COARSE_CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return label
    return "Other"


def _expense_totals(events: List[CashFlowEvent]) -> tuple[Dict[str, float], Dict[str, float]]:
    by_description: Dict[str, float] = {}
    by_category: Dict[str, float] = {}
    for event in events:
        if event.is_income or not has_valid_amount(event):
            continue
        by_description[event.description] = by_description.get(event.description, 0.0) + event.amount
        label = coarse_category(event.description)
        by_category[label] = by_category.get(label, 0.0) + event.amount
    return by_description, by_category


def advise(
    projection: List[ProjectionPoint],
    events: List[CashFlowEvent],
    summary: Optional[Summary],
) -> List[CoachTip]:
    """
    Produce up to three tips, highest confidence first.

    Rules, in emission order:
    - overdraft within 14 days -> suggest the stay-positive plan (0.9)
    - streaming/subscription charges -> review up to two of them (0.75)
    - Dining or Other is the top coarse category -> trim ~20% (0.65)
    - balance grows by $500+ -> auto-save up to $150 (0.7)

    Sorting is stable, so equal confidences keep emission order.
    """
    if summary is None or not projection:
        return []

    tips: List[CoachTip] = []
    min_balance = min(p.balance for p in projection)
    days_to_negative = next((i for i, p in enumerate(projection) if p.balance < 0), None)

    if days_to_negative is not None and days_to_negative <= OVERDRAFT_HORIZON_DAYS:
        plural = "" if days_to_negative == 1 else "s"
        tips.append(
            CoachTip(
                title=f"Risk of negative balance in {days_to_negative} day{plural}",
                detail=(
                    f"Your forecast dips below $0 soon (min {money(min_balance)}). "
                    "Try delaying the next bill and splitting your largest bill."
                ),
                impact="Raises near-term cushion via deferral & split",
                confidence=0.9,
                action="apply-plan",
            )
        )

    by_description, by_category = _expense_totals(events)

    subscriptions = sorted(
        ((desc, amount) for desc, amount in by_description.items() if SUBSCRIPTION_PATTERN.search(desc)),
        key=lambda item: item[1],
        reverse=True,
    )[:MAX_SUBSCRIPTION_TIPS]

    for desc, amount in subscriptions:
        tips.append(
            CoachTip(
                title=f"Review subscription: {desc}",
                detail=f"Recurring charge detected. Pausing or downgrading {desc} could free up {money(amount)} this month.",
                impact=f"+{money(amount)} cushion",
                confidence=0.75,
                action="none",
            )
        )

    if by_category:
        # max() keeps the first of equal totals, i.e. the earliest-seen category
        category, total = max(by_category.items(), key=lambda item: item[1])
        if category in ("Dining", "Other"):
            suggested_cut = round_half_up(total * TRIM_SHARE / 5) * 5
            if suggested_cut >= MIN_TRIM:
                tips.append(
                    CoachTip(
                        title=f"Trim {category} by {money(suggested_cut)} this month",
                        detail="Set a weekly cap and auto-move leftover cash to savings.",
                        impact=f"Projected end +{money(suggested_cut)}",
                        confidence=0.65,
                        action="none",
                    )
                )

    growth = summary.end - summary.start
    if growth >= AUTO_SAVE_THRESHOLD:
        safe_save = min(AUTO_SAVE_CAP, math.floor(growth * 0.25 / 25) * 25)
        if safe_save >= MIN_AUTO_SAVE:
            tips.append(
                CoachTip(
                    title=f"Auto-save {money(safe_save)} now",
                    detail=f"You're on track to grow cash this month. Lock in {money(safe_save)} to a rainy-day fund.",
                    impact="Builds emergency cushion",
                    confidence=0.7,
                    action="none",
                )
            )

    return sorted(tips, key=lambda tip: tip.confidence, reverse=True)[:MAX_TIPS]


def cash_outlook(summary: Optional[Summary]) -> str:
    """Classify a forecast summary into a one-word mood for the dashboard banner"""
    if summary is None:
        return "unknown"

    delta = summary.end - summary.start
    volatility = abs(summary.inflows - summary.outflows)

    if delta > 800 and summary.inflows >= summary.outflows:
        return "sunny"
    if delta > 0 and volatility > 600:
        return "partly"
    if delta <= 0 and summary.outflows > summary.inflows and volatility > 800:
        return "storm"
    if delta <= 0:
        return "rain"
    return "rainbow"
