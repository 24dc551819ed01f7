"""Shift-duration math shared by every payroll computation.

Pure functions only. Callers must reuse these rather than re-deriving
durations, so overnight and break handling stay consistent everywhere.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..common.datetime_utils import minutes_of_day
from ..core.constants import MINUTES_PER_DAY, STANDARD_SHIFT_FLOOR_HOURS


def shift_duration_minutes(start: time, end: time) -> int:
    """Minutes from start to end; an end earlier than start crosses midnight."""
    start_m = minutes_of_day(start)
    end_m = minutes_of_day(end)
    if end_m < start_m:
        end_m += MINUTES_PER_DAY
    return end_m - start_m


def billable_minutes(total_minutes: int, break_minutes: Optional[int]) -> int:
    return max(0, int(total_minutes) - int(break_minutes or 0))


def standard_shift_hours(employee) -> float:
    """Configured shift length minus configured break, in hours (floor: 8h)."""
    if employee.shift_start is None or employee.shift_end is None:
        return STANDARD_SHIFT_FLOOR_HOURS
    minutes = billable_minutes(
        shift_duration_minutes(employee.shift_start, employee.shift_end),
        employee.break_minutes,
    )
    if minutes <= 0:
        return STANDARD_SHIFT_FLOOR_HOURS
    return minutes / 60


@dataclass(frozen=True)
class MinuteSplit:
    regular: int
    overtime: int

    @property
    def billable(self) -> int:
        return self.regular + self.overtime


def split_regular_overtime(start: time, end: time, break_minutes: Optional[int], cutoff_minute: int) -> MinuteSplit:
    """Split a punch pair around the overtime cutoff.

    ``cutoff_minute`` is measured on the same axis as the shift, so a cutoff
    past midnight is given as e.g. 1560 (02:00 next day). Break time comes
    off regular minutes first, the remainder off overtime.
    """
    start_m = minutes_of_day(start)
    end_m = start_m + shift_duration_minutes(start, end)

    regular = max(0, min(end_m, cutoff_minute) - start_m)
    overtime = max(0, end_m - max(start_m, cutoff_minute))

    remaining = int(break_minutes or 0)
    taken = min(regular, remaining)
    regular -= taken
    remaining -= taken
    overtime = max(0, overtime - remaining)
    return MinuteSplit(regular=regular, overtime=overtime)
