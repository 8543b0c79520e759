from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Designation, Employee
from .repository import EmployeeDirectory

_EMPLOYEE_COLUMNS = """
    employee_id, employee_number, full_name, email, join_date,
    designation_id, company_id, department_id, is_active, principal_id
"""


def _to_employee(row: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        employee_number=row["employee_number"],
        full_name=row["full_name"],
        email=row["email"],
        join_date=row["join_date"],
        designation_id=int(row["designation_id"]),
        company_id=int(row["company_id"]),
        department_id=int(row["department_id"]),
        is_active=bool(row.get("is_active", True)),
        principal_id=row.get("principal_id"),
    )


class MySQLEmployeeRepository(EmployeeDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _find_one(self, where: str, params: tuple) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_EMPLOYEE_COLUMNS} FROM employees WHERE {where}", params)
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def find_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._find_one("employee_id=%s", (int(employee_id),))

    def find_by_email(self, email: str, *, case_insensitive: bool = True) -> Optional[Employee]:
        if case_insensitive:
            return self._find_one("LOWER(email)=LOWER(%s)", (email,))
        return self._find_one("email=%s COLLATE utf8mb4_bin", (email,))

    def find_by_principal(self, principal_id: str) -> Optional[Employee]:
        return self._find_one("principal_id=%s", (principal_id,))

    def link_principal(self, employee_id: int, principal_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET principal_id=%s
                WHERE employee_id=%s AND principal_id IS NULL
                """,
                (principal_id, int(employee_id)),
            )
            return cur.rowcount > 0

    def update_designation(self, employee_id: int, designation_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET designation_id=%s WHERE employee_id=%s",
                (int(designation_id), int(employee_id)),
            )
            return cur.rowcount > 0

    def list_designations(self) -> Sequence[Designation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT designation_id, title, grade FROM designations ORDER BY designation_id")
            return [
                Designation(
                    designation_id=int(r["designation_id"]),
                    title=r["title"],
                    grade=r.get("grade"),
                )
                for r in fetchall(cur)
            ]
