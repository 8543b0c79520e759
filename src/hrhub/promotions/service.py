from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional

from ..core.enums import ErrorKind
from ..core.exceptions import ConcurrencyConflictError
from ..database.connection import UnitOfWork
from ..employees.repository import EmployeeDirectory
from .model import (
    Promotion,
    PromotionCheck,
    PromotionForm,
    PromotionHistory,
    PromotionHistoryRow,
    PromotionOutcome,
)
from .repository import PromotionStore

logger = logging.getLogger(__name__)


class PromotionValidator:
    """Validates a designation change against the employee's history.

    - employee must exist
    - old designation must match the current one (stale client state)
    - new designation must differ from old
    - effective date >= join date
    - effective date > last promotion's effective date, if any
    """

    def __init__(self, employees: EmployeeDirectory, promotions: PromotionStore):
        self._employees = employees
        self._promotions = promotions

    def validate(
        self,
        employee_id: int,
        old_designation_id: int,
        new_designation_id: int,
        effective_date: date,
    ) -> PromotionCheck:
        employee = self._employees.find_by_id(int(employee_id))
        if employee is None:
            return PromotionCheck.failure(ErrorKind.NOT_FOUND, "Employee not found.")

        if int(old_designation_id) != employee.designation_id:
            return PromotionCheck.failure(
                ErrorKind.DESIGNATION_MISMATCH,
                "Old designation must match employee's current designation.",
                context={"current_designation_id": employee.designation_id},
            )

        if int(new_designation_id) == int(old_designation_id):
            return PromotionCheck.failure(
                ErrorKind.SAME_DESIGNATION,
                "New designation cannot be the same as old designation.",
            )

        if effective_date < employee.join_date:
            return PromotionCheck.failure(
                ErrorKind.EFFECTIVE_DATE_TOO_EARLY,
                "Effective date cannot be earlier than Join Date.",
                context={"join_date": employee.join_date},
            )

        last = self._promotions.last_effective_date(employee.employee_id)
        if last is not None and effective_date <= last:
            return PromotionCheck.failure(
                ErrorKind.EFFECTIVE_DATE_NOT_MONOTONIC,
                f"Effective date must be later than last promotion date ({last:%Y-%m-%d}).",
                context={"last_promotion_date": last},
                last_promotion_date=last,
            )

        return PromotionCheck.success(last_promotion_date=last)


class PromotionApplier:
    """Use case: record a promotion and move the employee to the new designation."""

    def __init__(
        self,
        validator: PromotionValidator,
        employees: EmployeeDirectory,
        promotions: PromotionStore,
        uow: UnitOfWork,
    ):
        self._validator = validator
        self._employees = employees
        self._promotions = promotions
        self._uow = uow

    def apply(
        self,
        *,
        employee_id: int,
        old_designation_id: int,
        new_designation_id: int,
        effective_date: date,
        notes: Optional[str] = None,
    ) -> PromotionOutcome:
        promotion = Promotion(
            employee_id=int(employee_id),
            old_designation_id=int(old_designation_id),
            new_designation_id=int(new_designation_id),
            effective_date=effective_date,
            notes=notes,
        )

        try:
            with self._uow.transaction(isolation_level="SERIALIZABLE"):
                check = self._validator.validate(
                    promotion.employee_id,
                    promotion.old_designation_id,
                    promotion.new_designation_id,
                    promotion.effective_date,
                )
                if not check.ok:
                    return PromotionOutcome.failure(check.error, check.message, context=check.context)

                promotion_id = self._promotions.insert(promotion)
                if not self._employees.update_designation(promotion.employee_id, promotion.new_designation_id):
                    # Raising rolls back the promotion insert.
                    raise ConcurrencyConflictError(f"employee {promotion.employee_id} was not updated")
        except ConcurrencyConflictError:
            logger.warning("Promotion for employee %s rolled back", employee_id)
            return PromotionOutcome.failure(
                ErrorKind.CONCURRENCY_CONFLICT,
                "The employee was changed by someone else. Please retry.",
            )

        logger.info(
            "Employee %s promoted %s -> %s effective %s",
            employee_id, old_designation_id, new_designation_id, effective_date,
        )
        return PromotionOutcome.success(
            "Promotion saved and employee designation updated.",
            promotion=replace(promotion, promotion_id=promotion_id),
        )

    def prepare(self, employee_id: int) -> PromotionForm:
        employee = self._employees.find_by_id(int(employee_id))
        if employee is None:
            return PromotionForm.failure(ErrorKind.NOT_FOUND, "Employee not found.")

        designations = list(self._employees.list_designations())
        current = next((d for d in designations if d.designation_id == employee.designation_id), None)
        return PromotionForm.success(
            employee_id=employee.employee_id,
            employee_name=employee.full_name,
            current_designation_id=employee.designation_id,
            current_designation=current.title if current else str(employee.designation_id),
            last_promotion_date=self._promotions.last_effective_date(employee.employee_id),
            designations=designations,
        )

    def history(self, employee_id: int) -> Optional[PromotionHistory]:
        """Promotions most-recent-first with designation titles; None if the employee is unknown."""
        employee = self._employees.find_by_id(int(employee_id))
        if employee is None:
            return None

        titles = {d.designation_id: d.title for d in self._employees.list_designations()}
        return PromotionHistory(
            employee_id=employee.employee_id,
            employee_name=employee.full_name,
            promotions=[
                PromotionHistoryRow(
                    promotion_id=p.promotion_id,
                    effective_date=p.effective_date,
                    old_designation=titles.get(p.old_designation_id, str(p.old_designation_id)),
                    new_designation=titles.get(p.new_designation_id, str(p.new_designation_id)),
                    notes=p.notes,
                )
                for p in self._promotions.list_by_employee(employee.employee_id)
            ],
        )
