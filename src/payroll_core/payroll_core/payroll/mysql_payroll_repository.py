from __future__ import annotations

import json
from datetime import date
from typing import Optional, Sequence

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PayrollPeriodSummary
from .repository import PayrollRepository


def _to_summary(r: dict) -> PayrollPeriodSummary:
    snapshot = r["snapshot"]
    if isinstance(snapshot, (bytes, bytearray)):
        snapshot = snapshot.decode("utf-8")
    if isinstance(snapshot, str):
        snapshot = json.loads(snapshot)
    return PayrollPeriodSummary.from_dict(snapshot)


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_id: int, start: date, end: date) -> Optional[PayrollPeriodSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT snapshot FROM payroll_entries WHERE employee_id=%s AND period_start=%s AND period_end=%s",
                (int(employee_id), start, end),
            )
            r = fetchone(cur)
            return _to_summary(r) if r else None

    def list_for_period(self, start: date, end: date) -> Sequence[PayrollPeriodSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT snapshot FROM payroll_entries WHERE period_start=%s AND period_end=%s ORDER BY employee_id",
                (start, end),
            )
            return [_to_summary(r) for r in fetchall(cur)]

    def save(self, summary: PayrollPeriodSummary) -> PayrollPeriodSummary:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT snapshot FROM payroll_entries
                WHERE employee_id=%s AND period_start=%s AND period_end=%s
                FOR UPDATE
                """,
                (summary.employee_id, summary.period_start, summary.period_end),
            )
            r = fetchone(cur)
            if r:
                existing = _to_summary(r)
                if existing.status == PayrollStatus.PAID:
                    return existing
                cur.execute(
                    """
                    UPDATE payroll_entries
                    SET status=%s, gross_pay=%s, net_pay=%s, snapshot=%s, paid_at=%s
                    WHERE employee_id=%s AND period_start=%s AND period_end=%s
                    """,
                    (
                        summary.status.value,
                        summary.gross_pay,
                        summary.net_pay,
                        json.dumps(summary.to_dict()),
                        summary.paid_at,
                        summary.employee_id,
                        summary.period_start,
                        summary.period_end,
                    ),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO payroll_entries(employee_id, period_start, period_end, status, gross_pay, net_pay, snapshot, paid_at)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        summary.employee_id,
                        summary.period_start,
                        summary.period_end,
                        summary.status.value,
                        summary.gross_pay,
                        summary.net_pay,
                        json.dumps(summary.to_dict()),
                        summary.paid_at,
                    ),
                )
        return summary
