from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..core.enums import ErrorKind, LeaveStatus
from ..core.exceptions import ConcurrencyConflictError
from ..database.connection import UnitOfWork
from .model import LeaveDecision, LeaveRequest, LeaveRow, LeaveType
from .repository import LeaveStore, LeaveTypeStore
from .validator import LeaveValidator

logger = logging.getLogger(__name__)

# Validate-then-write must not interleave with another writer's quota check.
ISOLATION = "SERIALIZABLE"


class LeaveService:
    """Use case: submit leave requests and decide them (approve/reject)."""

    def __init__(
        self,
        leaves: LeaveStore,
        leave_types: LeaveTypeStore,
        validator: LeaveValidator,
        uow: UnitOfWork,
    ):
        self._leaves = leaves
        self._leave_types = leave_types
        self._validator = validator
        self._uow = uow

    def submit(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        start: date,
        end: date,
        reason: Optional[str] = None,
    ) -> LeaveDecision:
        try:
            with self._uow.transaction(isolation_level=ISOLATION):
                check = self._validator.validate(employee_id, leave_type_id, start, end)
                if not check.ok:
                    return LeaveDecision.failure(check.error, check.message, context=check.context)

                request = LeaveRequest(
                    employee_id=int(employee_id),
                    leave_type_id=int(leave_type_id),
                    start_date=start,
                    end_date=end,
                    days=check.working_days,
                    status=LeaveStatus.PENDING,
                    reason=reason,
                )
                leave_id = self._leaves.insert(request)
        except ConcurrencyConflictError:
            return self._conflict()

        logger.info("Leave %s submitted by employee %s (%s days)", leave_id, employee_id, check.working_days)
        return LeaveDecision.success("Leave request submitted.", leave=replace(request, leave_id=leave_id))

    def approve(self, leave_id: int, approver_employee_id: Optional[int]) -> LeaveDecision:
        try:
            with self._uow.transaction(isolation_level=ISOLATION):
                request = self._leaves.find_by_id(int(leave_id))
                guard = self._guard_pending(request, leave_id)
                if guard is not None:
                    return guard

                # Re-validate: quota or attendance may have changed since submission.
                check = self._validator.validate(
                    request.employee_id,
                    request.leave_type_id,
                    request.start_date,
                    request.end_date,
                )
                if not check.ok:
                    return LeaveDecision.failure(check.error, check.message, context=check.context, leave=request)

                approved = replace(
                    request,
                    status=LeaveStatus.APPROVED,
                    approver_employee_id=approver_employee_id,
                )
                if not self._leaves.update(approved, expected_status=LeaveStatus.PENDING):
                    return self._conflict()
        except ConcurrencyConflictError:
            return self._conflict()

        logger.info("Leave %s approved by employee %s", leave_id, approver_employee_id)
        return LeaveDecision.success("Leave approved.", leave=approved)

    def reject(self, leave_id: int) -> LeaveDecision:
        try:
            with self._uow.transaction():
                request = self._leaves.find_by_id(int(leave_id))
                guard = self._guard_pending(request, leave_id)
                if guard is not None:
                    return guard

                rejected = replace(request, status=LeaveStatus.REJECTED)
                if not self._leaves.update(rejected, expected_status=LeaveStatus.PENDING):
                    return self._conflict()
        except ConcurrencyConflictError:
            return self._conflict()

        logger.info("Leave %s rejected", leave_id)
        return LeaveDecision.success("Leave rejected.", leave=rejected)

    def list_pending(self) -> Sequence[LeaveRow]:
        return self._leaves.list_pending()

    def list_for_employee(self, employee_id: int) -> Sequence[LeaveRow]:
        return self._leaves.list_by_employee(int(employee_id))

    def list_types(self) -> Sequence[LeaveType]:
        return self._leave_types.list_types()

    @staticmethod
    def _guard_pending(request: Optional[LeaveRequest], leave_id: int) -> Optional[LeaveDecision]:
        if request is None:
            return LeaveDecision.failure(ErrorKind.NOT_FOUND, f"Leave {leave_id} not found.")
        if request.status.is_terminal:
            return LeaveDecision.failure(
                ErrorKind.INVALID_STATE_TRANSITION,
                f"Leave {leave_id} is already {request.status.value}.",
                context={"status": request.status.value},
                leave=request,
            )
        return None

    @staticmethod
    def _conflict() -> LeaveDecision:
        return LeaveDecision.failure(
            ErrorKind.CONCURRENCY_CONFLICT,
            "The request was changed by someone else. Please retry.",
        )
