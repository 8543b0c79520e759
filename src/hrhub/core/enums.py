from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role claims carried in the session cookie."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class LeaveStatus(str, Enum):
    """Leave request workflow status, stored verbatim in the database."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not LeaveStatus.PENDING


class AttendanceState(str, Enum):
    """Daily check-in/check-out state for one employee on one date."""

    NO_RECORD = "NO_RECORD"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"


class ErrorKind(str, Enum):
    """Named business-rule failures returned by the services."""

    INVALID_RANGE = "InvalidRange"
    BACKDATE_LIMIT_EXCEEDED = "BackdateLimitExceeded"
    OVERLAP_APPROVED = "OverlapApproved"
    NO_WORKING_DAYS = "NoWorkingDays"
    ATTENDANCE_CONFLICT = "AttendanceConflict"
    QUOTA_EXCEEDED = "QuotaExceeded"
    ALREADY_CHECKED_IN = "AlreadyCheckedIn"
    ALREADY_CHECKED_OUT = "AlreadyCheckedOut"
    NOT_CHECKED_IN = "NotCheckedIn"
    INVALID_TIME_ORDER = "InvalidTimeOrder"
    NOT_FOUND = "NotFound"
    DESIGNATION_MISMATCH = "DesignationMismatch"
    SAME_DESIGNATION = "SameDesignation"
    EFFECTIVE_DATE_TOO_EARLY = "EffectiveDateTooEarly"
    EFFECTIVE_DATE_NOT_MONOTONIC = "EffectiveDateNotMonotonic"
    INVALID_STATE_TRANSITION = "InvalidStateTransition"
    CONCURRENCY_CONFLICT = "ConcurrencyConflict"
