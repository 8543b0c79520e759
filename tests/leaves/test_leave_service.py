from __future__ import annotations

from dataclasses import replace
from datetime import date, time
from decimal import Decimal

import pytest

from hrhub.attendance.model import AttendanceRecord
from hrhub.core.enums import ErrorKind, LeaveStatus
from hrhub.core.exceptions import ConcurrencyConflictError
from hrhub.leaves.model import LeaveRequest


def submit(service, start=date(2024, 3, 17), end=date(2024, 3, 19), **kwargs):
    kwargs.setdefault("employee_id", 1)
    kwargs.setdefault("leave_type_id", 1)
    return service.submit(start=start, end=end, **kwargs)


def test_submit_persists_pending_with_working_days(container, leaves):
    result = submit(container.leave_service, reason="family")

    assert result.ok
    stored = leaves.find_by_id(result.leave.leave_id)
    assert stored.status == LeaveStatus.PENDING
    assert stored.days == Decimal(3)
    assert stored.reason == "family"
    assert stored.approver_employee_id is None


def test_submit_runs_serializable(container, uow):
    submit(container.leave_service)

    assert uow.isolation_levels == ["SERIALIZABLE"]
    assert uow.commits == 1


def test_failed_submit_stores_nothing(container, leaves):
    result = submit(container.leave_service, start=date(2024, 3, 22), end=date(2024, 3, 23))

    assert result.error == ErrorKind.NO_WORKING_DAYS
    assert leaves.by_id == {}


def test_approve_marks_approved_and_records_approver(container, leaves):
    leave_id = submit(container.leave_service).leave.leave_id

    result = container.leave_service.approve(leave_id, approver_employee_id=2)

    assert result.ok
    stored = leaves.find_by_id(leave_id)
    assert stored.status == LeaveStatus.APPROVED
    assert stored.approver_employee_id == 2


def test_approve_without_linked_approver(container, leaves):
    leave_id = submit(container.leave_service).leave.leave_id

    assert container.leave_service.approve(leave_id, approver_employee_id=None).ok
    assert leaves.find_by_id(leave_id).approver_employee_id is None


def test_approve_revalidates_against_attendance(container, leaves, attendance):
    leave_id = submit(container.leave_service).leave.leave_id
    attendance.add(AttendanceRecord(employee_id=1, work_date=date(2024, 3, 18), in_time=time(9, 0)))

    result = container.leave_service.approve(leave_id, approver_employee_id=2)

    assert result.error == ErrorKind.ATTENDANCE_CONFLICT
    assert leaves.find_by_id(leave_id).status == LeaveStatus.PENDING


def test_second_overlapping_pending_cannot_both_be_approved(container, leaves):
    first = submit(container.leave_service).leave.leave_id
    second = submit(container.leave_service, start=date(2024, 3, 18), end=date(2024, 3, 20)).leave.leave_id

    assert container.leave_service.approve(first, approver_employee_id=2).ok
    result = container.leave_service.approve(second, approver_employee_id=2)

    assert result.error == ErrorKind.OVERLAP_APPROVED
    assert leaves.find_by_id(second).status == LeaveStatus.PENDING


def test_approve_revalidates_quota(container, leaves):
    leaves.add(
        LeaveRequest(
            employee_id=1,
            leave_type_id=1,
            start_date=date(2024, 2, 1),
            end_date=date(2024, 2, 14),
            days=Decimal(8),
            status=LeaveStatus.PENDING,
        )
    )
    pending = submit(container.leave_service).leave.leave_id
    # The older request gets approved in the meantime.
    earlier = leaves.find_by_id(1)
    leaves.update(replace(earlier, status=LeaveStatus.APPROVED), expected_status=LeaveStatus.PENDING)

    result = container.leave_service.approve(pending, approver_employee_id=2)

    assert result.error == ErrorKind.QUOTA_EXCEEDED


@pytest.mark.parametrize("decide", ["approve", "reject"])
def test_decided_leave_cannot_be_decided_again(container, decide):
    service = container.leave_service
    leave_id = submit(service).leave.leave_id
    assert service.reject(leave_id).ok

    result = service.approve(leave_id, 2) if decide == "approve" else service.reject(leave_id)

    assert result.error == ErrorKind.INVALID_STATE_TRANSITION
    assert result.context == {"status": "Rejected"}


def test_approved_leave_cannot_be_rejected(container, leaves):
    service = container.leave_service
    leave_id = submit(service).leave.leave_id
    assert service.approve(leave_id, 2).ok

    result = service.reject(leave_id)

    assert result.error == ErrorKind.INVALID_STATE_TRANSITION
    assert leaves.find_by_id(leave_id).status == LeaveStatus.APPROVED


def test_reject_does_not_revalidate(container, leaves, attendance):
    leave_id = submit(container.leave_service).leave.leave_id
    attendance.add(AttendanceRecord(employee_id=1, work_date=date(2024, 3, 18), in_time=time(9, 0)))

    result = container.leave_service.reject(leave_id)

    assert result.ok
    assert leaves.find_by_id(leave_id).status == LeaveStatus.REJECTED


@pytest.mark.parametrize("decide", ["approve", "reject"])
def test_unknown_leave_is_not_found(container, decide):
    service = container.leave_service

    result = service.approve(404, 2) if decide == "approve" else service.reject(404)

    assert result.error == ErrorKind.NOT_FOUND


def test_lost_status_update_is_a_conflict(container, leaves, monkeypatch):
    leave_id = submit(container.leave_service).leave.leave_id
    monkeypatch.setattr(leaves, "update", lambda request, *, expected_status: False)

    result = container.leave_service.approve(leave_id, 2)

    assert result.error == ErrorKind.CONCURRENCY_CONFLICT


def test_driver_conflict_becomes_a_result(container, leaves, monkeypatch):
    def deadlock(request):
        raise ConcurrencyConflictError("deadlock")

    monkeypatch.setattr(leaves, "insert", deadlock)

    result = submit(container.leave_service)

    assert not result.ok
    assert result.error == ErrorKind.CONCURRENCY_CONFLICT


def test_lists(container):
    service = container.leave_service
    first = submit(service).leave.leave_id
    second = submit(service, start=date(2024, 3, 24), end=date(2024, 3, 25)).leave.leave_id
    service.reject(second)

    assert [row.leave_id for row in service.list_pending()] == [first]
    assert [row.leave_id for row in service.list_for_employee(1)] == [second, first]
    assert [t.name for t in service.list_types()] == ["Casual"]
