from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceStore


class MySQLAttendanceRepository(AttendanceStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, employee_id, work_date, in_time, out_time
                FROM attendance
                WHERE employee_id=%s AND work_date=%s
                """,
                (int(employee_id), work_date),
            )
            row = fetchone(cur)
            if not row:
                return None
            return AttendanceRecord(
                attendance_id=int(row["attendance_id"]),
                employee_id=int(row["employee_id"]),
                work_date=row["work_date"],
                in_time=normalize_mysql_time(row.get("in_time")),
                out_time=normalize_mysql_time(row.get("out_time")),
            )

    def upsert(self, record: AttendanceRecord) -> bool:
        # Single statement, so the UNIQUE(employee_id, work_date) row lock
        # serializes concurrent writers. Assignments run left to right:
        # out_time is decided against the stored in_time.
        # rowcount: 1 = inserted, 2 = updated, 0 = nothing changed.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(employee_id, work_date, in_time, out_time)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    out_time = IF(out_time IS NULL AND in_time IS NOT NULL, VALUES(out_time), out_time),
                    in_time = IF(in_time IS NULL, VALUES(in_time), in_time)
                """,
                (int(record.employee_id), record.work_date, record.in_time, record.out_time),
            )
            return cur.rowcount > 0

    def exists_in_range(self, employee_id: int, start: date, end: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS hit
                FROM attendance
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                LIMIT 1
                """,
                (int(employee_id), start, end),
            )
            return fetchone(cur) is not None

    def report_rows(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceReportRow]:
        where = []
        params: list = []
        if start is not None:
            where.append("a.work_date >= %s")
            params.append(start)
        if end is not None:
            where.append("a.work_date <= %s")
            params.append(end)

        sql = """
            SELECT a.employee_id, e.full_name, a.work_date, a.in_time, a.out_time
            FROM attendance a
            JOIN employees e ON e.employee_id = a.employee_id
        """
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY a.work_date ASC, e.full_name ASC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [
                AttendanceReportRow(
                    employee_id=int(r["employee_id"]),
                    employee_name=r["full_name"],
                    work_date=r["work_date"],
                    in_time=normalize_mysql_time(r.get("in_time")),
                    out_time=normalize_mysql_time(r.get("out_time")),
                )
                for r in fetchall(cur)
            ]
