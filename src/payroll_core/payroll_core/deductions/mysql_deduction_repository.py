from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import DeductionStatus, DeductionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, lock_employee_row, to_money
from .model import Deduction, NewDeduction
from .repository import DeductionRepository

_COLUMNS = "deduction_id, employee_id, deduction_type, amount, period_start, period_end, description, status"


def _to_deduction(r: dict) -> Deduction:
    return Deduction(
        deduction_id=int(r["deduction_id"]),
        employee_id=int(r["employee_id"]),
        deduction_type=DeductionType(r["deduction_type"]),
        amount=to_money(r["amount"]),
        period_start=r["period_start"],
        period_end=r["period_end"],
        description=r.get("description"),
        status=DeductionStatus(r["status"]),
    )


def _insert(cur, employee_id: int, start: date, end: date, item: NewDeduction) -> Deduction:
    cur.execute(
        """
        INSERT INTO deductions(employee_id, deduction_type, amount, period_start, period_end, description, status)
        VALUES(%s,%s,%s,%s,%s,%s,%s)
        """,
        (
            int(employee_id),
            item.deduction_type.value,
            item.amount,
            start,
            end,
            item.description,
            DeductionStatus.ACTIVE.value,
        ),
    )
    return Deduction(
        deduction_id=int(cur.lastrowid),
        employee_id=int(employee_id),
        deduction_type=item.deduction_type,
        amount=float(item.amount),
        period_start=start,
        period_end=end,
        description=item.description,
    )


class MySQLDeductionRepository(DeductionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, deduction_id: int) -> Optional[Deduction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM deductions WHERE deduction_id=%s", (int(deduction_id),))
            r = fetchone(cur)
            return _to_deduction(r) if r else None

    def list_active(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        deduction_type: Optional[DeductionType] = None,
    ) -> Sequence[Deduction]:
        clauses = ["employee_id=%s", "status=%s"]
        params: list[object] = [int(employee_id), DeductionStatus.ACTIVE.value]
        if start is not None:
            clauses.append("period_start>=%s")
            params.append(start)
        if end is not None:
            clauses.append("period_end<=%s")
            params.append(end)
        if deduction_type is not None:
            clauses.append("deduction_type=%s")
            params.append(deduction_type.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM deductions WHERE {where} ORDER BY period_start ASC, deduction_id ASC",
                tuple(params),
            )
            return [_to_deduction(r) for r in fetchall(cur)]

    def add(self, employee_id: int, start: date, end: date, item: NewDeduction) -> Deduction:
        with db_cursor(self._conn_factory) as (_, cur):
            return _insert(cur, employee_id, start, end, item)

    def cancel(self, deduction_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE deductions SET status=%s WHERE deduction_id=%s AND status=%s",
                (DeductionStatus.CANCELLED.value, int(deduction_id), DeductionStatus.ACTIVE.value),
            )
            return cur.rowcount > 0

    def replace_for_period(self, employee_id: int, start: date, end: date, items: Sequence[NewDeduction]) -> Sequence[Deduction]:
        with db_cursor(self._conn_factory) as (_, cur):
            lock_employee_row(cur, employee_id)
            cur.execute(
                """
                UPDATE deductions SET status=%s
                WHERE employee_id=%s AND status=%s AND period_start>=%s AND period_end<=%s
                """,
                (DeductionStatus.CANCELLED.value, int(employee_id), DeductionStatus.ACTIVE.value, start, end),
            )
            return [_insert(cur, employee_id, start, end, item) for item in items]
