"""Domain models - immutable dataclasses produced and consumed by the forecast core"""

import math
from dataclasses import dataclass, field
from typing import List, Optional


INCOME = "income"
EXPENSE = "expense"


@dataclass(frozen=True)
class CashFlowEvent:
    """Single dated money movement (purchase, deposit or bill)"""

    amount: float  # always a non-negative magnitude, sign comes from kind
    date: str  # ISO calendar day "YYYY-MM-DD"
    kind: str = EXPENSE  # "income" or "expense"
    description: str = ""
    is_bill: bool = False
    event_id: Optional[str] = None
    category: Optional[str] = None

    @property
    def is_income(self) -> bool:
        return self.kind == INCOME

    @property
    def signed_amount(self) -> float:
        return self.amount if self.is_income else -self.amount


@dataclass(frozen=True)
class ProjectionPoint:
    """Projected end-of-day balance"""

    date: str
    balance: float


@dataclass(frozen=True)
class RiskWindow:
    """Date span over which the projected balance is negative"""

    start: str
    end: str
    min_balance: float  # minimum across the whole projection, not just the window


@dataclass(frozen=True)
class CategoryRow:
    """Per-category spending total"""

    category: str
    total: float
    count: int


@dataclass(frozen=True)
class Summary:
    """Start/end balance and flow totals for one forecast run"""

    start: float
    inflows: float
    outflows: float
    end: float


@dataclass(frozen=True)
class CoachTip:
    """Advice emitted by the cash coach"""

    title: str
    detail: str
    impact: str
    confidence: float
    action: str = "none"  # "apply-plan" | "none"


@dataclass(frozen=True)
class Account:
    """Bank account as returned by the upstream provider"""

    account_id: str
    balance: Optional[float]
    customer_id: Optional[str] = None
    nickname: Optional[str] = None


@dataclass(frozen=True)
class ForecastResult:
    """Everything one forecast run produces"""

    projection: List[ProjectionPoint]
    categories: List[CategoryRow]
    risk: Optional[RiskWindow]
    summary: Summary
    tips: List[CoachTip] = field(default_factory=list)
    upcoming_bills: List[CashFlowEvent] = field(default_factory=list)
    outlook: str = "unknown"


def has_valid_amount(event: CashFlowEvent) -> bool:
    """True when the event carries a finite, non-negative amount"""
    amount = event.amount
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return False
    return math.isfinite(amount) and amount >= 0
