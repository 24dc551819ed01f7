from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..bonus.model import BonusSettings
from ..common.datetime_utils import count_working_days, overlap
from ..core.enums import DayType
from ..employees.model import Employee
from ..payroll.calculator.earnings import EarningsCalculator
from ..timesheets.model import TimesheetEntry
from .model import AttendanceAggregate


class AttendanceAggregator:
    """Folds a period of timesheet rows into attendance figures."""

    def __init__(self, calculator: EarningsCalculator):
        self._calculator = calculator

    def aggregate(
        self,
        employee: Employee,
        entries: Iterable[TimesheetEntry],
        start: date,
        end: date,
        bonus_settings: Optional[BonusSettings] = None,
    ) -> AttendanceAggregate:
        present = travel = bonus_days = 0
        billable = overtime = 0
        seen = set()

        for entry in entries:
            if not (start <= entry.work_date <= end) or entry.work_date in seen:
                continue
            seen.add(entry.work_date)
            if not entry.is_present:
                continue
            present += 1
            if entry.day_type == DayType.TRAVEL:
                travel += 1
            if bonus_settings and bonus_settings.covers(entry.work_date):
                bonus_days += 1
            minutes = self._calculator.split(entry, employee)
            billable += minutes.billable
            overtime += minutes.overtime

        working = count_working_days(start, end)
        max_bonus_days = 0
        if bonus_settings:
            window = overlap(start, end, bonus_settings.start_date, bonus_settings.end_date)
            if window:
                max_bonus_days = count_working_days(*window)

        total_hours = billable / 60
        return AttendanceAggregate(
            present_days=present,
            total_working_days=working,
            absent_days=max(0, working - present),
            travel_days=travel,
            total_hours=round(total_hours, 2),
            avg_hours_per_day=round(total_hours / present, 2) if present else 0.0,
            overtime_hours=round(overtime / 60, 2),
            bonus_days=bonus_days,
            max_bonus_days=max_bonus_days,
        )
