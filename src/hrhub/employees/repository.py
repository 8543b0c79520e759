from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Designation, Employee


class EmployeeDirectory(Protocol):
    """Repository interface for Employee lookups.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def find_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def find_by_email(self, email: str, *, case_insensitive: bool = True) -> Optional[Employee]:
        raise NotImplementedError

    def find_by_principal(self, principal_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def link_principal(self, employee_id: int, principal_id: str) -> bool:
        """Attach ``principal_id`` to an employee that has no link yet."""

        raise NotImplementedError

    def update_designation(self, employee_id: int, designation_id: int) -> bool:
        raise NotImplementedError

    def list_designations(self) -> Sequence[Designation]:
        raise NotImplementedError
