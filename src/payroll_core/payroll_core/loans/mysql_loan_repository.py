from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from typing import Iterator, Optional, Sequence

from ..core.enums import LoanStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, lock_employee_row, to_money
from .model import Loan
from .repository import LoanRepository, LoanTx

_COLUMNS = "loan_id, employee_id, amount, issued_on, status"


def _to_loan(r: dict) -> Loan:
    return Loan(
        loan_id=int(r["loan_id"]),
        employee_id=int(r["employee_id"]),
        amount=to_money(r["amount"]),
        issued_on=r["issued_on"],
        status=LoanStatus(r["status"]),
    )


class _MySQLLoanTx(LoanTx):
    def __init__(self, cur, employee_id: int):
        self._cur = cur
        self._employee_id = int(employee_id)

    def get_active(self) -> Optional[Loan]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM loans WHERE employee_id=%s AND status=%s FOR UPDATE",
            (self._employee_id, LoanStatus.ACTIVE.value),
        )
        rows = fetchall(self._cur)
        return _to_loan(rows[0]) if rows else None

    def insert_active(self, *, amount: float, issued_on: date) -> Loan:
        self._cur.execute(
            "INSERT INTO loans(employee_id, amount, issued_on, status) VALUES(%s,%s,%s,%s)",
            (self._employee_id, amount, issued_on, LoanStatus.ACTIVE.value),
        )
        return Loan(
            loan_id=int(self._cur.lastrowid),
            employee_id=self._employee_id,
            amount=float(amount),
            issued_on=issued_on,
        )

    def update_active(self, loan_id: int, *, amount: float, issued_on: date) -> Loan:
        self._cur.execute(
            "UPDATE loans SET amount=%s, issued_on=%s WHERE loan_id=%s AND status=%s",
            (amount, issued_on, int(loan_id), LoanStatus.ACTIVE.value),
        )
        return Loan(
            loan_id=int(loan_id),
            employee_id=self._employee_id,
            amount=float(amount),
            issued_on=issued_on,
        )


class MySQLLoanRepository(LoanRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def locked(self, employee_id: int) -> Iterator[LoanTx]:
        with db_cursor(self._conn_factory) as (_, cur):
            lock_employee_row(cur, employee_id)
            yield _MySQLLoanTx(cur, employee_id)

    def get(self, loan_id: int) -> Optional[Loan]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM loans WHERE loan_id=%s", (int(loan_id),))
            r = fetchone(cur)
            return _to_loan(r) if r else None

    def get_active(self, employee_id: int) -> Optional[Loan]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM loans WHERE employee_id=%s AND status=%s",
                (int(employee_id), LoanStatus.ACTIVE.value),
            )
            rows = fetchall(cur)
            return _to_loan(rows[0]) if rows else None

    def list_for_employee(self, employee_id: int) -> Sequence[Loan]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM loans WHERE employee_id=%s ORDER BY issued_on DESC, loan_id DESC",
                (int(employee_id),),
            )
            return [_to_loan(r) for r in fetchall(cur)]

    def close(self, loan_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE loans SET status=%s WHERE loan_id=%s AND status=%s",
                (LoanStatus.CLOSED.value, int(loan_id), LoanStatus.ACTIVE.value),
            )
            return cur.rowcount > 0
