from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest, LeaveRow, LeaveType


class LeaveStore(Protocol):
    def exists_approved_overlap(self, employee_id: int, start: date, end: date) -> bool:
        """Closed-interval overlap against Approved leaves only."""

        raise NotImplementedError

    def sum_approved_days(self, employee_id: int, leave_type_id: int, year: int) -> Decimal:
        """Approved days whose start_date falls in ``year``."""

        raise NotImplementedError

    def insert(self, request: LeaveRequest) -> int:
        raise NotImplementedError

    def find_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def update(self, request: LeaveRequest, *, expected_status: LeaveStatus) -> bool:
        """Persist status/approver, only if the stored status is still ``expected_status``."""

        raise NotImplementedError

    def list_pending(self) -> Sequence[LeaveRow]:
        raise NotImplementedError

    def list_by_employee(self, employee_id: int) -> Sequence[LeaveRow]:
        """Most recent start_date first."""

        raise NotImplementedError


class LeaveTypeStore(Protocol):
    def annual_quota(self, leave_type_id: int) -> Optional[Decimal]:
        raise NotImplementedError

    def list_types(self) -> Sequence[LeaveType]:
        raise NotImplementedError
