from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Promotion
from .repository import PromotionStore


class MySQLPromotionRepository(PromotionStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def last_effective_date(self, employee_id: int) -> Optional[date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT MAX(effective_date) AS last_date FROM promotions WHERE employee_id=%s",
                (int(employee_id),),
            )
            row = fetchone(cur)
            return row["last_date"] if row else None

    def insert(self, promotion: Promotion) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO promotions(employee_id, old_designation_id, new_designation_id, effective_date, notes)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    int(promotion.employee_id),
                    int(promotion.old_designation_id),
                    int(promotion.new_designation_id),
                    promotion.effective_date,
                    promotion.notes,
                ),
            )
            return int(cur.lastrowid)

    def list_by_employee(self, employee_id: int) -> Sequence[Promotion]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT promotion_id, employee_id, old_designation_id, new_designation_id, effective_date, notes
                FROM promotions
                WHERE employee_id=%s
                ORDER BY effective_date DESC, promotion_id DESC
                """,
                (int(employee_id),),
            )
            return [
                Promotion(
                    promotion_id=int(r["promotion_id"]),
                    employee_id=int(r["employee_id"]),
                    old_designation_id=int(r["old_designation_id"]),
                    new_designation_id=int(r["new_designation_id"]),
                    effective_date=r["effective_date"],
                    notes=r.get("notes"),
                )
                for r in fetchall(cur)
            ]
