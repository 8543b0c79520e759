from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import FrozenSet, Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Note: References company/department/designation by id only.
    """

    employee_id: int
    employee_number: str
    full_name: str
    email: str
    join_date: date
    designation_id: int
    company_id: int
    department_id: int
    is_active: bool = True
    principal_id: Optional[str] = None


@dataclass(frozen=True)
class Designation:
    designation_id: int
    title: str
    grade: Optional[int] = None


@dataclass(frozen=True)
class Principal:
    """An authenticated identity handed over by the upstream authenticator."""

    principal_id: str
    email: Optional[str]
    roles: FrozenSet[Role] = field(default_factory=frozenset)


@dataclass(frozen=True)
class LinkedIdentity:
    principal_id: str
    employee_id: int
    full_name: str
    roles: FrozenSet[Role]
