from __future__ import annotations

from typing import Optional

from ...common.datetime_utils import minutes_of_day, parse_hhmm
from ...core.constants import DEFAULT_OVERTIME_CUTOFF, MINUTES_PER_DAY
from ...core.enums import DayType
from ...employees.model import Employee
from ...timesheets.model import TimesheetEntry
from ..model import DailyEarnings
from ..time_arithmetic import MinuteSplit, billable_minutes, shift_duration_minutes, split_regular_overtime
from .factory import RateStrategyFactory


class EarningsCalculator:
    """Turns one timesheet day plus the employee's pay configuration into money.

    The single place where rate derivation happens; reports, payroll and
    the leaderboard all go through it.
    """

    def __init__(self, *, factory: Optional[RateStrategyFactory] = None):
        self._factory = factory or RateStrategyFactory()

    def hourly_rate(self, employee: Employee) -> float:
        return self._factory.hourly_rate(employee)

    @staticmethod
    def effective_break(entry: TimesheetEntry, employee: Employee) -> int:
        if entry.break_minutes is not None:
            return int(entry.break_minutes)
        return int(employee.break_minutes or 0)

    @staticmethod
    def _cutoff_minute(entry: TimesheetEntry, employee: Employee) -> int:
        cutoff = employee.shift_end or parse_hhmm(DEFAULT_OVERTIME_CUTOFF)
        cutoff_m = minutes_of_day(cutoff)
        wraps = employee.has_shift and employee.shift_end < employee.shift_start
        # Evening start of an overnight shift: its cutoff is on the next day.
        if wraps and minutes_of_day(entry.clock_in) >= cutoff_m:
            cutoff_m += MINUTES_PER_DAY
        return cutoff_m

    def split(self, entry: TimesheetEntry, employee: Employee) -> MinuteSplit:
        if not entry.has_punches:
            return MinuteSplit(regular=0, overtime=0)
        brk = self.effective_break(entry, employee)
        if entry.day_type == DayType.TRAVEL:
            total = shift_duration_minutes(entry.clock_in, entry.clock_out)
            return MinuteSplit(regular=billable_minutes(total, brk), overtime=0)
        return split_regular_overtime(entry.clock_in, entry.clock_out, brk, self._cutoff_minute(entry, employee))

    def compute(self, entry: TimesheetEntry, employee: Employee) -> DailyEarnings:
        if not entry.has_punches:
            return DailyEarnings(work_date=entry.work_date)

        minutes = self.split(entry, employee)
        rate = self.hourly_rate(employee)
        amount = max(0.0, rate * minutes.billable / 60)
        return DailyEarnings(
            work_date=entry.work_date,
            billable_minutes=minutes.billable,
            regular_minutes=minutes.regular,
            overtime_minutes=minutes.overtime,
            hourly_rate=rate,
            amount=round(amount, 2),
        )

    def daily_earnings(self, entry: TimesheetEntry, employee: Employee) -> float:
        return self.compute(entry, employee).amount
