from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import AttendanceState
from ..core.results import Result


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row, unique per (employee_id, work_date)."""

    employee_id: int
    work_date: date
    in_time: Optional[time] = None
    out_time: Optional[time] = None
    attendance_id: Optional[int] = None

    @property
    def state(self) -> AttendanceState:
        if self.in_time is None:
            return AttendanceState.NO_RECORD
        if self.out_time is None:
            return AttendanceState.CHECKED_IN
        return AttendanceState.CHECKED_OUT


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for the admin report (joined with employee name)."""

    employee_id: int
    employee_name: str
    work_date: date
    in_time: Optional[time]
    out_time: Optional[time]


@dataclass(frozen=True)
class AttendanceResult(Result):
    state: AttendanceState = AttendanceState.NO_RECORD
    record: Optional[AttendanceRecord] = None

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["state"] = self.state.value
        data["in_time"] = self.record.in_time.isoformat() if self.record and self.record.in_time else None
        data["out_time"] = self.record.out_time.isoformat() if self.record and self.record.out_time else None
        return data
