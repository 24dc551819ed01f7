from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from .model import TimesheetEntry, TimesheetInput


class TimesheetRepository(Protocol):
    def get(self, employee_id: int, work_date: date) -> Optional[TimesheetEntry]:
        raise NotImplementedError

    def list_for_period(self, employee_id: int, start: date, end: date) -> Sequence[TimesheetEntry]:
        raise NotImplementedError

    def list_for_employees(self, employee_ids: Sequence[int], start: date, end: date) -> Sequence[TimesheetEntry]:
        raise NotImplementedError

    def create_blank(self, employee_id: int, days: Iterable[date]) -> int:
        """Insert New rows for days that have none; returns how many were created."""

        raise NotImplementedError

    def upsert(self, data: TimesheetInput) -> TimesheetEntry:
        """Atomically insert or overwrite the row for (employee_id, work_date).

        The previous version of an overwritten row is kept as a revision.
        """

        raise NotImplementedError

    def revisions(self, employee_id: int, work_date: date) -> Sequence[TimesheetEntry]:
        raise NotImplementedError
