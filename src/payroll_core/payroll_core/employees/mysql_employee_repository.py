from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EmployeeStatus, PayBasis
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time, to_optional_money
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, name, role, status, pay_basis, shift_start, shift_end, break_minutes,
    per_shift_amount, hourly_rate, monthly_salary
"""


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        name=r["name"],
        role=r.get("role") or "",
        status=EmployeeStatus(r.get("status") or EmployeeStatus.ACTIVE.value),
        pay_basis=PayBasis(r["pay_basis"]) if r.get("pay_basis") else None,
        shift_start=normalize_mysql_time(r.get("shift_start")),
        shift_end=normalize_mysql_time(r.get("shift_end")),
        break_minutes=int(r.get("break_minutes") or 0),
        per_shift_amount=to_optional_money(r.get("per_shift_amount")),
        hourly_rate=to_optional_money(r.get("hourly_rate")),
        monthly_salary=to_optional_money(r.get("monthly_salary")),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_all(self, *, active_only: bool = False) -> Sequence[Employee]:
        where = "WHERE status=%s" if active_only else ""
        params = (EmployeeStatus.ACTIVE.value,) if active_only else ()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees {where} ORDER BY employee_id", params)
            return [_to_employee(r) for r in fetchall(cur)]
