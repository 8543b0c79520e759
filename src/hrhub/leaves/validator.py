from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import AbstractSet, Callable

from ..attendance.repository import AttendanceStore
from ..common.datetime_utils import today_local
from ..common.working_days import count_working_days
from ..core.constants import BACKDATE_LIMIT_DAYS, WEEKEND_DAYS
from ..core.enums import ErrorKind
from .model import LeaveCheck
from .repository import LeaveStore, LeaveTypeStore

logger = logging.getLogger(__name__)


class LeaveValidator:
    """Validates a leave request and computes its working-day count.

    Rules run in a fixed order and the first failure wins:

    1. start <= end
    2. start >= today - 7 days
    3. no overlap with an Approved leave (closed intervals)
    4. at least one working day (Fri/Sat excluded)
    5. no attendance recorded inside the range
    6. approved days this year (of start) + working days <= annual quota

    Used at submission and again at approval time.
    """

    def __init__(
        self,
        leaves: LeaveStore,
        leave_types: LeaveTypeStore,
        attendance: AttendanceStore,
        *,
        today: Callable[[], date] = today_local,
        weekend_days: AbstractSet[int] = WEEKEND_DAYS,
    ):
        self._leaves = leaves
        self._leave_types = leave_types
        self._attendance = attendance
        self._today = today
        self._weekend_days = frozenset(weekend_days)

    def validate(self, employee_id: int, leave_type_id: int, start: date, end: date) -> LeaveCheck:
        result = self._check(employee_id, leave_type_id, start, end)
        if not result.ok:
            logger.info(
                "Leave rejected for employee %s (%s..%s): %s",
                employee_id, start, end, result.error.value,
            )
        return result

    def _check(self, employee_id: int, leave_type_id: int, start: date, end: date) -> LeaveCheck:
        if start > end:
            return LeaveCheck.failure(
                ErrorKind.INVALID_RANGE,
                "Start date must be before or equal to end date.",
            )

        earliest = self._today() - timedelta(days=BACKDATE_LIMIT_DAYS)
        if start < earliest:
            return LeaveCheck.failure(
                ErrorKind.BACKDATE_LIMIT_EXCEEDED,
                f"Backdated requests beyond {BACKDATE_LIMIT_DAYS} days are not allowed.",
                context={"earliest": earliest},
            )

        if self._leaves.exists_approved_overlap(employee_id, start, end):
            return LeaveCheck.failure(ErrorKind.OVERLAP_APPROVED, "Overlaps with an approved leave.")

        working_days = Decimal(count_working_days(start, end, self._weekend_days))
        if working_days <= 0:
            return LeaveCheck.failure(ErrorKind.NO_WORKING_DAYS, "No working days in the selected range.")

        if self._attendance.exists_in_range(employee_id, start, end):
            return LeaveCheck.failure(ErrorKind.ATTENDANCE_CONFLICT, "Attendance exists in the selected range.")

        quota = self._leave_types.annual_quota(leave_type_id)
        if quota is None:
            return LeaveCheck.failure(ErrorKind.NOT_FOUND, "Leave type not found.")

        # Year-spanning leave is charged entirely to the year of start.
        used = self._leaves.sum_approved_days(employee_id, leave_type_id, start.year)
        if used + working_days > quota:
            return LeaveCheck.failure(
                ErrorKind.QUOTA_EXCEEDED,
                f"Quota exceeded. Used {used}, request {working_days}, quota {quota}.",
                context={"used": used, "requested": working_days, "quota": quota},
            )

        return LeaveCheck.success(working_days=working_days)
