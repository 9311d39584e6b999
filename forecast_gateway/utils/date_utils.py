"""Date manipulation utilities"""

import re
from datetime import date, timedelta
from typing import List, Optional

CALENDAR_DAY_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def generate_date_range(start: date, days: int) -> List[date]:
    """Generate `days` consecutive dates beginning at start"""
    return [start + timedelta(days=i) for i in range(max(days, 0))]


def parse_calendar_day(value) -> Optional[date]:
    """Parse a zero-padded "YYYY-MM-DD" string, returning None when it is not one"""
    if not isinstance(value, str) or not CALENDAR_DAY_PATTERN.fullmatch(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def shift_calendar_day(value: str, days: int) -> str:
    """Move an ISO calendar day forward by a number of days"""
    return (date.fromisoformat(value) + timedelta(days=days)).isoformat()
