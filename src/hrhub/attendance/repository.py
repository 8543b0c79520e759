from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, AttendanceReportRow


class AttendanceStore(Protocol):
    def find(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(self, record: AttendanceRecord) -> bool:
        """Write ``record`` without overwriting a stored in/out time.

        Returns False when the stored row already had the time the record
        tries to set (a concurrent writer got there first).
        """

        raise NotImplementedError

    def exists_in_range(self, employee_id: int, start: date, end: date) -> bool:
        raise NotImplementedError

    def report_rows(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceReportRow]:
        """Rows ordered by date, then employee name."""

        raise NotImplementedError
