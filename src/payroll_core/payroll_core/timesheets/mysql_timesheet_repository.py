from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import DayType, EntryStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import TimesheetEntry, TimesheetInput, next_status
from .repository import TimesheetRepository

_COLUMNS = "entry_id, employee_id, work_date, clock_in, clock_out, break_minutes, day_type, status"


def _to_entry(r: dict, *, id_column: str = "entry_id") -> TimesheetEntry:
    return TimesheetEntry(
        entry_id=int(r[id_column]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        clock_in=normalize_mysql_time(r.get("clock_in")),
        clock_out=normalize_mysql_time(r.get("clock_out")),
        break_minutes=None if r.get("break_minutes") is None else int(r["break_minutes"]),
        day_type=DayType(r.get("day_type") or DayType.WORK.value),
        status=EntryStatus(r.get("status") or EntryStatus.NEW.value),
    )


class MySQLTimesheetRepository(TimesheetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, employee_id: int, work_date: date) -> Optional[TimesheetEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM timesheet_entries WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_for_period(self, employee_id: int, start: date, end: date) -> Sequence[TimesheetEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM timesheet_entries
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (int(employee_id), start, end),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_for_employees(self, employee_ids: Sequence[int], start: date, end: date) -> Sequence[TimesheetEntry]:
        if not employee_ids:
            return []
        placeholders = ",".join(["%s"] * len(employee_ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM timesheet_entries
                WHERE employee_id IN ({placeholders}) AND work_date BETWEEN %s AND %s
                ORDER BY employee_id ASC, work_date ASC
                """,
                tuple(int(i) for i in employee_ids) + (start, end),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def create_blank(self, employee_id: int, days: Iterable[date]) -> int:
        rows = [(int(employee_id), d, DayType.WORK.value, EntryStatus.NEW.value) for d in days]
        if not rows:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT IGNORE INTO timesheet_entries(employee_id, work_date, day_type, status)
                VALUES(%s,%s,%s,%s)
                """,
                rows,
            )
            return max(int(cur.rowcount or 0), 0)

    def upsert(self, data: TimesheetInput) -> TimesheetEntry:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM timesheet_entries
                WHERE employee_id=%s AND work_date=%s
                FOR UPDATE
                """,
                (int(data.employee_id), data.work_date),
            )
            r = fetchone(cur)
            existing = _to_entry(r) if r else None
            status = next_status(existing, data)
            values = (
                data.clock_in,
                data.clock_out,
                data.break_minutes,
                data.day_type.value,
                status.value,
            )

            if existing is None:
                cur.execute(
                    """
                    INSERT INTO timesheet_entries(clock_in, clock_out, break_minutes, day_type, status,
                                                  employee_id, work_date)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    values + (int(data.employee_id), data.work_date),
                )
                entry_id = int(cur.lastrowid)
            else:
                entry_id = existing.entry_id
                if existing.same_values(data) and existing.status == status:
                    return existing
                cur.execute(
                    """
                    INSERT INTO timesheet_revisions(entry_id, employee_id, work_date, clock_in, clock_out,
                                                    break_minutes, day_type, status)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        existing.entry_id,
                        existing.employee_id,
                        existing.work_date,
                        existing.clock_in,
                        existing.clock_out,
                        existing.break_minutes,
                        existing.day_type.value,
                        existing.status.value,
                    ),
                )
                cur.execute(
                    """
                    UPDATE timesheet_entries
                    SET clock_in=%s, clock_out=%s, break_minutes=%s, day_type=%s, status=%s
                    WHERE entry_id=%s
                    """,
                    values + (entry_id,),
                )

            return TimesheetEntry(
                entry_id=entry_id,
                employee_id=int(data.employee_id),
                work_date=data.work_date,
                clock_in=data.clock_in,
                clock_out=data.clock_out,
                break_minutes=data.break_minutes,
                day_type=data.day_type,
                status=status,
            )

    def revisions(self, employee_id: int, work_date: date) -> Sequence[TimesheetEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT revision_id, employee_id, work_date, clock_in, clock_out, break_minutes, day_type, status
                FROM timesheet_revisions
                WHERE employee_id=%s AND work_date=%s
                ORDER BY revision_id ASC
                """,
                (int(employee_id), work_date),
            )
            return [_to_entry(r, id_column="revision_id") for r in fetchall(cur)]
