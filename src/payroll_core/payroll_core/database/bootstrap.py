from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    quote = ""
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = ""
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf[:-1]).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


@contextmanager
def _server(db_config: dict, *, with_database: bool = True):
    target = DBConfig.from_mapping(db_config)
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    conn = mysql.connector.connect(**kwargs)
    try:
        yield target, conn
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    with _server(db_config, with_database=False) as (target, conn):
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()


def _apply_sql_file(db_config: dict, path: str | Path) -> int:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    count = 0
    with _server(db_config) as (_, conn):
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    return count


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _apply_sql_file(db_config, schema_path)
    logger.info("schema applied from %s (%d statements)", schema_path, count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _apply_sql_file(db_config, seed_path)
    logger.info("seed applied from %s (%d statements)", seed_path, count)


DEMO_EMPLOYEES = (
    # name, role, pay_basis, shift_start, shift_end, break, per_shift, hourly, monthly
    ("Asha Patel", "Store Manager", "PerShift", "09:00", "18:00", 60, 800, None, None),
    ("Ravi Kumar", "Technician", "Hourly", "10:00", "19:00", 45, None, 120, None),
    ("Meera Shah", "Accountant", "MonthlySalary", "09:30", "18:30", 60, None, None, 30000),
    ("Karan Mehta", "Developer", "PerShift", "11:00", "20:00", 60, 1000, None, None),
)


def ensure_demo_employees(db_config: dict) -> None:
    with _server(db_config) as (_, conn):
        cur = conn.cursor(dictionary=True)
        for name, role, basis, start, end, brk, per_shift, hourly, monthly in DEMO_EMPLOYEES:
            cur.execute("SELECT employee_id FROM employees WHERE name=%s", (name,))
            existing = cur.fetchone()
            params = (role, basis, start, end, brk, per_shift, hourly, monthly)
            if existing:
                cur.execute(
                    """
                    UPDATE employees
                    SET role=%s, pay_basis=%s, shift_start=%s, shift_end=%s, break_minutes=%s,
                        per_shift_amount=%s, hourly_rate=%s, monthly_salary=%s, status='Active'
                    WHERE employee_id=%s
                    """,
                    params + (existing["employee_id"],),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO employees(name, role, pay_basis, shift_start, shift_end, break_minutes,
                                          per_shift_amount, hourly_rate, monthly_salary)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (name,) + params,
                )
        conn.commit()


def list_tables(db_config: dict) -> list[str]:
    with _server(db_config) as (_, conn):
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
