from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Optional

from ..common.datetime_utils import format_hhmm
from ..core.enums import DayType, EntryStatus
from ..core.exceptions import FieldError


@dataclass(frozen=True)
class TimesheetInput:
    """A validated row ready to be upserted on (employee_id, work_date)."""

    employee_id: int
    work_date: date
    clock_in: Optional[time] = None
    clock_out: Optional[time] = None
    break_minutes: Optional[int] = None
    day_type: DayType = DayType.WORK

    @property
    def has_content(self) -> bool:
        return bool(self.clock_in or self.clock_out or self.day_type == DayType.TRAVEL)


@dataclass(frozen=True)
class TimesheetEntry:
    """Domain entity: one employee-day of punches. Unique per (employee_id, work_date)."""

    entry_id: int
    employee_id: int
    work_date: date
    clock_in: Optional[time] = None
    clock_out: Optional[time] = None
    break_minutes: Optional[int] = None
    day_type: DayType = DayType.WORK
    status: EntryStatus = EntryStatus.NEW

    @property
    def has_punches(self) -> bool:
        return self.clock_in is not None and self.clock_out is not None

    @property
    def is_present(self) -> bool:
        # Travel days count as attendance even without punches.
        return self.clock_in is not None or self.day_type == DayType.TRAVEL

    def same_values(self, data: TimesheetInput) -> bool:
        return (
            self.clock_in == data.clock_in
            and self.clock_out == data.clock_out
            and self.break_minutes == data.break_minutes
            and self.day_type == data.day_type
        )

    def to_dict(self) -> dict:
        return {
            "entry_id": self.entry_id,
            "employee_id": self.employee_id,
            "date": self.work_date.isoformat(),
            "clock_in": format_hhmm(self.clock_in),
            "clock_out": format_hhmm(self.clock_out),
            "break_minutes": self.break_minutes,
            "day_type": self.day_type.value,
            "status": self.status.value,
        }


def next_status(existing: Optional[TimesheetEntry], data: TimesheetInput) -> EntryStatus:
    """Lifecycle: New -> Active on first real content, Active -> Edited on any later change."""
    if existing is None or existing.status == EntryStatus.NEW:
        return EntryStatus.ACTIVE if data.has_content else EntryStatus.NEW
    if existing.same_values(data):
        return existing.status
    return EntryStatus.EDITED


@dataclass(frozen=True)
class SaveResult:
    saved: tuple[TimesheetEntry, ...] = ()
    errors: tuple[FieldError, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.errors
