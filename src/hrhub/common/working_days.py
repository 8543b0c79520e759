from __future__ import annotations

from datetime import date, timedelta
from typing import AbstractSet

from ..core.constants import WEEKEND_DAYS
from ..core.exceptions import InvalidRangeError


def count_working_days(start: date, end: date, weekend_days: AbstractSet[int] = WEEKEND_DAYS) -> int:
    """Count days in the inclusive range ``[start, end]`` not falling on a weekend.

    ``weekend_days`` holds ``date.weekday()`` values (Monday is 0).
    """
    if start > end:
        raise InvalidRangeError(f"start {start.isoformat()} is after end {end.isoformat()}")

    days = 0
    d = start
    while d <= end:
        if d.weekday() not in weekend_days:
            days += 1
        d += timedelta(days=1)
    return days
