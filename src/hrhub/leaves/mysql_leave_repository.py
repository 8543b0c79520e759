from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest, LeaveRow, LeaveType
from .repository import LeaveStore, LeaveTypeStore

_ROW_SELECT = """
    SELECT l.leave_id, l.employee_id, e.full_name, t.name AS leave_type_name,
           l.start_date, l.end_date, l.days, l.status, l.reason
    FROM leaves l
    JOIN employees e ON e.employee_id = l.employee_id
    JOIN leave_types t ON t.leave_type_id = l.leave_type_id
"""


def _to_row(r: Dict[str, Any]) -> LeaveRow:
    return LeaveRow(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        employee_name=r["full_name"],
        leave_type_name=r["leave_type_name"],
        start_date=r["start_date"],
        end_date=r["end_date"],
        days=Decimal(r["days"]),
        status=LeaveStatus(r["status"]),
        reason=r.get("reason"),
    )


class MySQLLeaveRepository(LeaveStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists_approved_overlap(self, employee_id: int, start: date, end: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS hit
                FROM leaves
                WHERE employee_id=%s AND status=%s
                  AND start_date <= %s AND end_date >= %s
                LIMIT 1
                """,
                (int(employee_id), LeaveStatus.APPROVED.value, end, start),
            )
            return fetchone(cur) is not None

    def sum_approved_days(self, employee_id: int, leave_type_id: int, year: int) -> Decimal:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(SUM(days), 0) AS used
                FROM leaves
                WHERE employee_id=%s AND leave_type_id=%s AND status=%s
                  AND start_date BETWEEN %s AND %s
                """,
                (
                    int(employee_id),
                    int(leave_type_id),
                    LeaveStatus.APPROVED.value,
                    date(int(year), 1, 1),
                    date(int(year), 12, 31),
                ),
            )
            row = fetchone(cur)
            return Decimal(row["used"]) if row else Decimal(0)

    def insert(self, request: LeaveRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leaves(employee_id, leave_type_id, start_date, end_date, days, status, reason)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(request.employee_id),
                    int(request.leave_type_id),
                    request.start_date,
                    request.end_date,
                    request.days,
                    request.status.value,
                    request.reason,
                ),
            )
            return int(cur.lastrowid)

    def find_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT leave_id, employee_id, leave_type_id, start_date, end_date,
                       days, status, reason, approved_by_employee_id
                FROM leaves
                WHERE leave_id=%s
                """,
                (int(leave_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return LeaveRequest(
                leave_id=int(row["leave_id"]),
                employee_id=int(row["employee_id"]),
                leave_type_id=int(row["leave_type_id"]),
                start_date=row["start_date"],
                end_date=row["end_date"],
                days=Decimal(row["days"]),
                status=LeaveStatus(row["status"]),
                reason=row.get("reason"),
                approver_employee_id=row.get("approved_by_employee_id"),
            )

    def update(self, request: LeaveRequest, *, expected_status: LeaveStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leaves
                SET status=%s, approved_by_employee_id=%s
                WHERE leave_id=%s AND status=%s
                """,
                (
                    request.status.value,
                    request.approver_employee_id,
                    int(request.leave_id),
                    expected_status.value,
                ),
            )
            return cur.rowcount > 0

    def list_pending(self) -> Sequence[LeaveRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _ROW_SELECT + " WHERE l.status=%s ORDER BY l.start_date ASC",
                (LeaveStatus.PENDING.value,),
            )
            return [_to_row(r) for r in fetchall(cur)]

    def list_by_employee(self, employee_id: int) -> Sequence[LeaveRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _ROW_SELECT + " WHERE l.employee_id=%s ORDER BY l.start_date DESC",
                (int(employee_id),),
            )
            return [_to_row(r) for r in fetchall(cur)]


class MySQLLeaveTypeRepository(LeaveTypeStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def annual_quota(self, leave_type_id: int) -> Optional[Decimal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT annual_quota FROM leave_types WHERE leave_type_id=%s",
                (int(leave_type_id),),
            )
            row = fetchone(cur)
            return Decimal(row["annual_quota"]) if row else None

    def list_types(self) -> Sequence[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT leave_type_id, name, annual_quota FROM leave_types ORDER BY name")
            return [
                LeaveType(
                    leave_type_id=int(r["leave_type_id"]),
                    name=r["name"],
                    annual_quota=Decimal(r["annual_quota"]),
                )
                for r in fetchall(cur)
            ]
