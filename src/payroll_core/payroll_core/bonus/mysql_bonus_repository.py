from __future__ import annotations

import json
from contextlib import contextmanager
from datetime import date
from typing import Iterator, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, lock_employee_row, to_money
from .model import BonusAccrual, BonusSettings, BonusWithdrawal
from .repository import BonusLedgerTx, BonusRepository

SETTINGS_KEY = "bonus"


def _totals(cur, employee_id: int) -> tuple[float, float]:
    cur.execute(
        """
        SELECT
            (SELECT COALESCE(SUM(amount), 0) FROM bonus_accruals WHERE employee_id=%s) AS accrued,
            (SELECT COALESCE(SUM(amount), 0) FROM bonus_withdrawals WHERE employee_id=%s) AS withdrawn
        """,
        (int(employee_id), int(employee_id)),
    )
    r = fetchone(cur) or {}
    return to_money(r.get("accrued")), to_money(r.get("withdrawn"))


class _MySQLBonusLedgerTx(BonusLedgerTx):
    def __init__(self, cur, employee_id: int):
        self._cur = cur
        self._employee_id = int(employee_id)

    def totals(self) -> tuple[float, float]:
        return _totals(self._cur, self._employee_id)

    def has_source(self, source_key: str) -> bool:
        self._cur.execute(
            "SELECT accrual_id FROM bonus_accruals WHERE employee_id=%s AND source_key=%s",
            (self._employee_id, source_key),
        )
        return fetchone(self._cur) is not None

    def source_keys(self, prefix: str) -> Sequence[str]:
        self._cur.execute(
            "SELECT source_key FROM bonus_accruals WHERE employee_id=%s AND source_key LIKE %s",
            (self._employee_id, prefix + "%"),
        )
        return [r["source_key"] for r in fetchall(self._cur)]

    def append_accrual(self, *, amount: float, accrued_on: date, bonus_days: int, source_key: str) -> BonusAccrual:
        self._cur.execute(
            """
            INSERT INTO bonus_accruals(employee_id, amount, bonus_days, accrued_on, source_key)
            VALUES(%s,%s,%s,%s,%s)
            """,
            (self._employee_id, amount, int(bonus_days), accrued_on, source_key),
        )
        return BonusAccrual(
            accrual_id=int(self._cur.lastrowid),
            employee_id=self._employee_id,
            amount=float(amount),
            accrued_on=accrued_on,
            source_key=source_key,
            bonus_days=int(bonus_days),
        )

    def append_withdrawal(self, *, amount: float, withdrawn_on: date, notes: Optional[str]) -> BonusWithdrawal:
        self._cur.execute(
            "INSERT INTO bonus_withdrawals(employee_id, amount, withdrawn_on, notes) VALUES(%s,%s,%s,%s)",
            (self._employee_id, amount, withdrawn_on, notes),
        )
        return BonusWithdrawal(
            withdrawal_id=int(self._cur.lastrowid),
            employee_id=self._employee_id,
            amount=float(amount),
            withdrawn_on=withdrawn_on,
            notes=notes,
        )


class MySQLBonusRepository(BonusRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def locked(self, employee_id: int) -> Iterator[BonusLedgerTx]:
        with db_cursor(self._conn_factory) as (_, cur):
            lock_employee_row(cur, employee_id)
            yield _MySQLBonusLedgerTx(cur, employee_id)

    def totals(self, employee_id: int) -> tuple[float, float]:
        with db_cursor(self._conn_factory) as (_, cur):
            return _totals(cur, employee_id)

    def list_accruals(self, employee_id: int) -> Sequence[BonusAccrual]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT accrual_id, employee_id, amount, bonus_days, accrued_on, source_key
                FROM bonus_accruals
                WHERE employee_id=%s
                ORDER BY accrued_on ASC, accrual_id ASC
                """,
                (int(employee_id),),
            )
            return [
                BonusAccrual(
                    accrual_id=int(r["accrual_id"]),
                    employee_id=int(r["employee_id"]),
                    amount=to_money(r["amount"]),
                    accrued_on=r["accrued_on"],
                    source_key=r["source_key"],
                    bonus_days=int(r.get("bonus_days") or 0),
                )
                for r in fetchall(cur)
            ]

    def list_withdrawals(self, employee_id: int) -> Sequence[BonusWithdrawal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT withdrawal_id, employee_id, amount, withdrawn_on, notes
                FROM bonus_withdrawals
                WHERE employee_id=%s
                ORDER BY withdrawn_on DESC, withdrawal_id DESC
                """,
                (int(employee_id),),
            )
            return [
                BonusWithdrawal(
                    withdrawal_id=int(r["withdrawal_id"]),
                    employee_id=int(r["employee_id"]),
                    amount=to_money(r["amount"]),
                    withdrawn_on=r["withdrawn_on"],
                    notes=r.get("notes"),
                )
                for r in fetchall(cur)
            ]

    def get_settings(self) -> Optional[BonusSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT setting_value FROM settings WHERE setting_key=%s", (SETTINGS_KEY,))
            r = fetchone(cur)
            if not r:
                return None
            value = r["setting_value"]
            if isinstance(value, (bytes, bytearray)):
                value = value.decode("utf-8")
            return BonusSettings.from_dict(json.loads(value) if isinstance(value, str) else value)

    def save_settings(self, settings: BonusSettings) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO settings(setting_key, setting_value)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE setting_value=VALUES(setting_value)
                """,
                (SETTINGS_KEY, json.dumps(settings.to_dict())),
            )
