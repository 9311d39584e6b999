"""Stay-positive plan: delay one bill and split the largest, without double-applying"""

from dataclasses import replace
from typing import List, Optional

from forecast_gateway.domain.models import CashFlowEvent
from forecast_gateway.utils.date_utils import parse_calendar_day, shift_calendar_day

PLAN_SHIFT_DAYS = 7


def _by_date(bills: List[CashFlowEvent]) -> List[CashFlowEvent]:
    return sorted(bills, key=lambda b: b.date)


def _is_split_pair(first: CashFlowEvent, second: CashFlowEvent) -> bool:
    return (
        first.description == second.description
        and first.amount == second.amount
        and parse_calendar_day(first.date) is not None
        and parse_calendar_day(second.date) is not None
        and shift_calendar_day(first.date, PLAN_SHIFT_DAYS) == second.date
    )


def plan_already_applied(bills: List[CashFlowEvent]) -> bool:
    """
    Detect the footprint a previous plan leaves behind.

    A split pair is two bills with the same description and amount, the
    second dated exactly 7 days after the first. Counting each pair as one
    bill of the combined amount, the plan has been applied when the largest
    of those bills is a split pair. Only bills with a parseable date count,
    the same set the plan itself schedules.
    """
    ordered = [b for b in _by_date(bills) if parse_calendar_day(b.date) is not None]
    paired = set()
    largest_pair = None

    for i, first in enumerate(ordered):
        if i in paired:
            continue
        for j in range(i + 1, len(ordered)):
            if j not in paired and _is_split_pair(first, ordered[j]):
                paired.update((i, j))
                combined = first.amount * 2
                if largest_pair is None or combined > largest_pair:
                    largest_pair = combined
                break

    if largest_pair is None:
        return False

    largest_single = max((b.amount for i, b in enumerate(ordered) if i not in paired), default=None)
    return largest_single is None or largest_pair >= largest_single


def delay_bill(bills: List[CashFlowEvent], index: int, days: int = PLAN_SHIFT_DAYS) -> List[CashFlowEvent]:
    """Move one bill `days` later; returns a new list in date order"""
    updated = list(bills)
    bill = updated[index]
    updated[index] = replace(bill, date=shift_calendar_day(bill.date, days))
    return _by_date(updated)


def split_bill(bills: List[CashFlowEvent], index: int, days: int = PLAN_SHIFT_DAYS) -> List[CashFlowEvent]:
    """Replace one bill with two halves: one on its date, one `days` later"""
    updated = list(bills)
    bill = updated.pop(index)
    half = bill.amount / 2
    updated.append(replace(bill, amount=half))
    updated.append(replace(bill, amount=half, date=shift_calendar_day(bill.date, days)))
    return _by_date(updated)


def apply_stay_positive_plan(bills: List[CashFlowEvent]) -> List[CashFlowEvent]:
    """
    Delay the earliest bill by a week and split the largest bill in two.

    The largest bill (first in date order on ties) is split into halves, one
    on its original date and one a week later. The earliest remaining bill is
    pushed back a week. Bills without a parseable date are left as they are.

    Idempotent: a list that already carries the plan's split pair comes back
    unchanged (only re-sorted), so repeated taps never delay or split twice.
    """
    ordered = _by_date(bills)
    schedulable = [i for i, b in enumerate(ordered) if parse_calendar_day(b.date) is not None]
    if not schedulable or plan_already_applied(ordered):
        return ordered

    largest = schedulable[0]
    for i in schedulable[1:]:
        if ordered[i].amount > ordered[largest].amount:
            largest = i

    earliest = next((i for i in schedulable if i != largest), None)
    if earliest is not None:
        bill = ordered[earliest]
        ordered[earliest] = replace(bill, date=shift_calendar_day(bill.date, PLAN_SHIFT_DAYS))

    return split_bill(ordered, largest)


class PlanSession:
    """
    Caller-held undo buffer for the stay-positive plan.

    Holds a single snapshot; each apply overwrites the previous one.
    """

    def __init__(self):
        self._snapshot: Optional[List[CashFlowEvent]] = None

    @property
    def can_undo(self) -> bool:
        return self._snapshot is not None

    def apply(self, bills: List[CashFlowEvent]) -> List[CashFlowEvent]:
        self._snapshot = list(bills)
        return apply_stay_positive_plan(bills)

    def undo(self) -> Optional[List[CashFlowEvent]]:
        """Return the pre-plan bills and clear the buffer"""
        snapshot, self._snapshot = self._snapshot, None
        return snapshot
