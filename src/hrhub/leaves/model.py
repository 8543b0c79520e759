from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import LeaveStatus
from ..core.results import Result


@dataclass(frozen=True)
class LeaveType:
    leave_type_id: int
    name: str
    annual_quota: Decimal


@dataclass(frozen=True)
class LeaveRequest:
    """Domain entity: a leave request over the inclusive range [start_date, end_date]."""

    employee_id: int
    leave_type_id: int
    start_date: date
    end_date: date
    days: Decimal
    status: LeaveStatus = LeaveStatus.PENDING
    leave_id: Optional[int] = None
    approver_employee_id: Optional[int] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class LeaveRow:
    """Read-model for listings (joined with employee and leave type names)."""

    leave_id: int
    employee_id: int
    employee_name: str
    leave_type_name: str
    start_date: date
    end_date: date
    days: Decimal
    status: LeaveStatus
    reason: Optional[str] = None


@dataclass(frozen=True)
class LeaveCheck(Result):
    working_days: Decimal = Decimal(0)


@dataclass(frozen=True)
class LeaveDecision(Result):
    leave: Optional[LeaveRequest] = None
