from __future__ import annotations

import io
import logging
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Sequence

from ..bonus.model import BonusAccrual
from ..bonus.service import BonusLedger
from ..common.datetime_utils import now_local
from ..common.validators import require_date_range
from ..core.enums import PayrollStatus
from ..core.exceptions import NotFound
from ..deductions.service import DeductionService
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..scoring.aggregator import AttendanceAggregator
from ..timesheets.model import TimesheetEntry
from ..timesheets.repository import TimesheetRepository
from .calculator.earnings import EarningsCalculator
from .export import summaries_frame, write_workbook
from .model import DailyEarnings, PayrollPeriodSummary
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


class PayrollService:
    def __init__(
        self,
        employees: EmployeeRepository,
        timesheets: TimesheetRepository,
        payroll: PayrollRepository,
        *,
        calculator: EarningsCalculator,
        deductions: DeductionService,
        bonus: BonusLedger,
        aggregator: Optional[AttendanceAggregator] = None,
    ):
        self._employees = employees
        self._timesheets = timesheets
        self._payroll = payroll
        self._calculator = calculator
        self._deductions = deductions
        self._bonus = bonus
        self._aggregator = aggregator or AttendanceAggregator(calculator)

    def _employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFound(f"Employee {employee_id} not found")
        return employee

    def _entries(self, employee_id: int, start: date, end: date) -> list[TimesheetEntry]:
        rows = self._timesheets.list_for_period(int(employee_id), start, end)
        return sorted((e for e in rows if start <= e.work_date <= end), key=lambda e: e.work_date)

    def list_period(self, start: date, end: date) -> Sequence[PayrollPeriodSummary]:
        """Stored snapshots of a period (Pending and Paid)."""
        require_date_range(start, end)
        return self._payroll.list_for_period(start, end)

    def compute_daily_earnings(self, entry: TimesheetEntry, employee: Employee) -> DailyEarnings:
        return self._calculator.compute(entry, employee)

    def daily_breakdown(self, employee_id: int, start: date, end: date) -> Sequence[DailyEarnings]:
        require_date_range(start, end)
        employee = self._employee(employee_id)
        return [self._calculator.compute(e, employee) for e in self._entries(employee_id, start, end)]

    def compute_period_summary(self, employee_id: int, start: date, end: date, *, store: bool = True) -> PayrollPeriodSummary:
        """Pending summaries are recomputed (and re-stored unless store=False); a Paid snapshot comes back as stored."""
        require_date_range(start, end)
        stored = self._payroll.get(int(employee_id), start, end)
        if stored and stored.status == PayrollStatus.PAID:
            return stored

        employee = self._employee(employee_id)
        entries = self._entries(employee_id, start, end)
        days = [self._calculator.compute(e, employee) for e in entries]
        gross = round(sum(d.amount for d in days), 2)
        net = self._deductions.net_for_period(employee.employee_id, gross, start, end)

        summary = PayrollPeriodSummary(
            employee_id=employee.employee_id,
            period_start=start,
            period_end=end,
            gross_pay=gross,
            loan_deduction=net.loan,
            advance_deduction=net.advance,
            manual_deduction=net.manual,
            total_deductions=net.total,
            net_pay=net.net_pay,
            working_days=sum(1 for e in entries if e.is_present),
            billable_minutes=sum(d.billable_minutes for d in days),
            overtime_minutes=sum(d.overtime_minutes for d in days),
            hourly_rate=round(self._calculator.hourly_rate(employee), 2),
            warnings=(net.warning,) if net.warning else (),
        )
        return self._payroll.save(summary) if store else summary

    def mark_paid(self, employee_ids: Iterable[int], start: date, end: date) -> Sequence[PayrollPeriodSummary]:
        paid = []
        for employee_id in employee_ids:
            summary = self.compute_period_summary(employee_id, start, end)
            if summary.status != PayrollStatus.PAID:
                summary = self._payroll.save(
                    replace(
                        summary,
                        status=PayrollStatus.PAID,
                        paid_at=now_local().strftime("%Y-%m-%d %H:%M:%S"),
                    )
                )
                logger.info("payroll %s..%s marked paid for employee %s: net %.2f", start, end, employee_id, summary.net_pay)
            paid.append(summary)
        return paid

    def accrue_period_bonus(self, employee_id: int, start: date, end: date) -> Optional[BonusAccrual]:
        """Accrue the period's bonus days; days an earlier period accrual covers are never paid twice."""
        require_date_range(start, end)
        employee = self._employee(employee_id)
        settings = self._bonus.get_settings()
        entries = self._entries(employee_id, start, end)

        def count_bonus_days(covered: Sequence[tuple[date, date]]) -> int:
            fresh = [e for e in entries if not any(lo <= e.work_date <= hi for lo, hi in covered)]
            return self._aggregator.aggregate(employee, fresh, start, end, settings).bonus_days

        return self._bonus.accrue_period(employee.employee_id, start, end, count_bonus_days, settings=settings)

    def export_period(self, employee_ids: Iterable[int], start: date, end: date) -> io.BytesIO:
        rows = []
        for employee_id in employee_ids:
            employee = self._employee(employee_id)
            rows.append((employee.name, self.compute_period_summary(employee.employee_id, start, end, store=False)))
        return write_workbook(summaries_frame(rows))
