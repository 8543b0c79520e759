from __future__ import annotations

import logging
from typing import Optional

from ..core.enums import Role
from .model import Employee, LinkedIdentity, Principal
from .repository import EmployeeDirectory

logger = logging.getLogger(__name__)

DEFAULT_ROLE = Role.EMPLOYEE


class IdentityLinker:
    """Use case: associate an authenticated principal with its Employee record.

    ``link_or_create`` is idempotent. The first call for a principal links it
    to the unlinked employee with the same email (case-insensitive); later
    calls find the stored link. Every successful call grants the default
    employee role claim.
    """

    def __init__(self, employees: EmployeeDirectory):
        self._employees = employees

    def link_or_create(self, principal: Principal) -> Optional[LinkedIdentity]:
        employee = self._employees.find_by_principal(principal.principal_id)
        if employee is None:
            employee = self._link_by_email(principal)
            if employee is None:
                return None

        return LinkedIdentity(
            principal_id=principal.principal_id,
            employee_id=employee.employee_id,
            full_name=employee.full_name,
            roles=frozenset(principal.roles) | {DEFAULT_ROLE},
        )

    def _link_by_email(self, principal: Principal) -> Optional[Employee]:
        email = (principal.email or "").strip()
        if not email:
            return None

        candidate = self._employees.find_by_email(email, case_insensitive=True)
        if candidate is None or candidate.principal_id is not None:
            logger.info("No linkable employee for principal %s", principal.principal_id)
            return None

        if self._employees.link_principal(candidate.employee_id, principal.principal_id):
            logger.info("Linked principal %s to employee %s", principal.principal_id, candidate.employee_id)
            return candidate

        # A concurrent session may have linked the same principal first.
        return self._employees.find_by_principal(principal.principal_id)
