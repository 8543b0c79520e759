from __future__ import annotations

import calendar
import logging
from dataclasses import replace
from datetime import date, time
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import format_time, now_local
from ..core.enums import AttendanceState, ErrorKind
from ..core.exceptions import ValidationError
from .model import AttendanceRecord, AttendanceReportRow, AttendanceResult
from .repository import AttendanceStore

logger = logging.getLogger(__name__)


class AttendanceTracker:
    """Daily check-in/check-out state machine.

    NO_RECORD -> CHECKED_IN -> CHECKED_OUT; nothing leaves CHECKED_OUT.
    """

    def __init__(self, attendance: AttendanceStore, *, clock: Callable = now_local):
        self._attendance = attendance
        self._clock = clock

    def check_in(self, employee_id: int, work_date: date, at: time) -> AttendanceResult:
        record = self._attendance.find(employee_id, work_date)
        if record is not None and record.state is not AttendanceState.NO_RECORD:
            return self._already_checked_in(record)

        new_record = (
            replace(record, in_time=at)
            if record is not None
            else AttendanceRecord(employee_id=employee_id, work_date=work_date, in_time=at)
        )
        if not self._attendance.upsert(new_record):
            logger.info("Lost check-in race for employee %s on %s", employee_id, work_date)
            return self._already_checked_in(self._attendance.find(employee_id, work_date))

        logger.info("Employee %s checked in on %s at %s", employee_id, work_date, at)
        return AttendanceResult.success(
            "Checked in successfully.",
            state=AttendanceState.CHECKED_IN,
            record=new_record,
        )

    def check_out(self, employee_id: int, work_date: date, at: time) -> AttendanceResult:
        record = self._attendance.find(employee_id, work_date)
        if record is None or record.in_time is None:
            return AttendanceResult.failure(
                ErrorKind.NOT_CHECKED_IN,
                "Please check in first.",
                record=record,
            )
        if record.out_time is not None:
            return self._already_checked_out(record)
        if at <= record.in_time:
            return AttendanceResult.failure(
                ErrorKind.INVALID_TIME_ORDER,
                "Out time must be greater than in time.",
                context={"in_time": record.in_time, "out_time": at},
                state=AttendanceState.CHECKED_IN,
                record=record,
            )

        new_record = replace(record, out_time=at)
        if not self._attendance.upsert(new_record):
            logger.info("Lost check-out race for employee %s on %s", employee_id, work_date)
            return self._already_checked_out(self._attendance.find(employee_id, work_date))

        logger.info("Employee %s checked out on %s at %s", employee_id, work_date, at)
        return AttendanceResult.success(
            "Checked out successfully.",
            state=AttendanceState.CHECKED_OUT,
            record=new_record,
        )

    def today(self) -> date:
        return self._clock().date()

    def check_in_now(self, employee_id: int) -> AttendanceResult:
        now = self._clock()
        return self.check_in(employee_id, now.date(), now.time().replace(microsecond=0))

    def check_out_now(self, employee_id: int) -> AttendanceResult:
        now = self._clock()
        return self.check_out(employee_id, now.date(), now.time().replace(microsecond=0))

    def status(self, employee_id: int, work_date: date) -> AttendanceResult:
        record = self._attendance.find(employee_id, work_date)
        state = record.state if record is not None else AttendanceState.NO_RECORD

        if state is AttendanceState.NO_RECORD:
            message = "Not checked in yet."
        elif state is AttendanceState.CHECKED_IN:
            message = f"Checked in at {format_time(record.in_time)}"
        else:
            message = f"Checked out at {format_time(record.out_time)}"

        return AttendanceResult.success(message, state=state, record=record)

    def report(
        self,
        *,
        on: Optional[date] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        """Consolidated admin report for one day, one month, or everything."""
        if on is not None:
            return self._attendance.report_rows(start=on, end=on)

        if year is not None and month is not None:
            if not 1 <= int(month) <= 12:
                raise ValidationError("month must be between 1 and 12")
            last_day = calendar.monthrange(int(year), int(month))[1]
            return self._attendance.report_rows(
                start=date(int(year), int(month), 1),
                end=date(int(year), int(month), last_day),
            )

        return self._attendance.report_rows()

    @staticmethod
    def _already_checked_in(record: Optional[AttendanceRecord]) -> AttendanceResult:
        return AttendanceResult.failure(
            ErrorKind.ALREADY_CHECKED_IN,
            "Already checked in.",
            state=record.state if record else AttendanceState.CHECKED_IN,
            record=record,
        )

    @staticmethod
    def _already_checked_out(record: Optional[AttendanceRecord]) -> AttendanceResult:
        return AttendanceResult.failure(
            ErrorKind.ALREADY_CHECKED_OUT,
            "Already checked out.",
            state=AttendanceState.CHECKED_OUT,
            record=record,
        )
