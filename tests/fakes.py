from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, time
from typing import Iterable, Optional

from src.payroll_core.payroll_core.bonus.model import BonusAccrual, BonusSettings, BonusWithdrawal
from src.payroll_core.payroll_core.container import assemble_container
from src.payroll_core.payroll_core.core.enums import (
    DayType,
    DeductionStatus,
    EntryStatus,
    LoanStatus,
    PayBasis,
    PayrollStatus,
)
from src.payroll_core.payroll_core.core.exceptions import NotFound
from src.payroll_core.payroll_core.deductions.model import Deduction, NewDeduction
from src.payroll_core.payroll_core.employees.model import Employee
from src.payroll_core.payroll_core.loans.model import Loan
from src.payroll_core.payroll_core.payroll.model import PayrollPeriodSummary
from src.payroll_core.payroll_core.timesheets.model import TimesheetEntry, TimesheetInput, next_status

DEFAULT_BONUS = BonusSettings(start_date=date(2025, 4, 1), end_date=date(2026, 3, 31), amount_per_day=35.0)


def make_employee(employee_id: int = 1, **overrides) -> Employee:
    values = dict(
        employee_id=employee_id,
        name=f"Employee {employee_id}",
        role="Staff",
        pay_basis=PayBasis.PER_SHIFT,
        shift_start=time(9, 0),
        shift_end=time(18, 0),
        break_minutes=60,
        per_shift_amount=800.0,
    )
    values.update(overrides)
    return Employee(**values)


class _EmployeeLocks:
    """Per-employee locks standing in for SELECT ... FOR UPDATE."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[int, threading.RLock] = {}

    def get(self, employee_id: int) -> threading.RLock:
        with self._guard:
            return self._locks.setdefault(int(employee_id), threading.RLock())


class InMemoryEmployees:
    def __init__(self, *employees: Employee):
        self.by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.by_id.get(int(employee_id))

    def list_all(self, *, active_only: bool = False):
        rows = sorted(self.by_id.values(), key=lambda e: e.employee_id)
        return [e for e in rows if e.is_active] if active_only else rows


class InMemoryTimesheets:
    def __init__(self):
        self.rows: dict[tuple[int, date], TimesheetEntry] = {}
        self.history: list[TimesheetEntry] = []
        self._id = 0

    def add(self, employee_id: int, work_date: date, clock_in=None, clock_out=None, **kwargs) -> TimesheetEntry:
        """Test helper: store a row as-is."""
        self._id += 1
        entry = TimesheetEntry(
            entry_id=self._id,
            employee_id=employee_id,
            work_date=work_date,
            clock_in=clock_in,
            clock_out=clock_out,
            status=kwargs.pop("status", EntryStatus.ACTIVE),
            **kwargs,
        )
        self.rows[(employee_id, work_date)] = entry
        return entry

    def get(self, employee_id: int, work_date: date) -> Optional[TimesheetEntry]:
        return self.rows.get((int(employee_id), work_date))

    def list_for_period(self, employee_id: int, start: date, end: date):
        return sorted(
            (e for (emp, d), e in self.rows.items() if emp == int(employee_id) and start <= d <= end),
            key=lambda e: e.work_date,
        )

    def list_for_employees(self, employee_ids, start: date, end: date):
        wanted = {int(i) for i in employee_ids}
        return sorted(
            (e for (emp, d), e in self.rows.items() if emp in wanted and start <= d <= end),
            key=lambda e: (e.employee_id, e.work_date),
        )

    def create_blank(self, employee_id: int, days: Iterable[date]) -> int:
        created = 0
        for d in days:
            if (int(employee_id), d) not in self.rows:
                self.add(int(employee_id), d, status=EntryStatus.NEW, day_type=DayType.WORK)
                created += 1
        return created

    def upsert(self, data: TimesheetInput) -> TimesheetEntry:
        key = (data.employee_id, data.work_date)
        existing = self.rows.get(key)
        status = next_status(existing, data)
        if existing is not None:
            if existing.same_values(data) and existing.status == status:
                return existing
            self.history.append(existing)
            entry_id = existing.entry_id
        else:
            self._id += 1
            entry_id = self._id
        entry = TimesheetEntry(
            entry_id=entry_id,
            employee_id=data.employee_id,
            work_date=data.work_date,
            clock_in=data.clock_in,
            clock_out=data.clock_out,
            break_minutes=data.break_minutes,
            day_type=data.day_type,
            status=status,
        )
        self.rows[key] = entry
        return entry

    def revisions(self, employee_id: int, work_date: date):
        return [e for e in self.history if e.employee_id == int(employee_id) and e.work_date == work_date]


class _BonusTx:
    def __init__(self, repo: "InMemoryBonus", employee_id: int):
        self._repo = repo
        self._employee_id = employee_id

    def totals(self):
        return self._repo.totals(self._employee_id)

    def has_source(self, source_key: str) -> bool:
        return any(a.employee_id == self._employee_id and a.source_key == source_key for a in self._repo.accruals)

    def source_keys(self, prefix: str):
        return [
            a.source_key
            for a in self._repo.accruals
            if a.employee_id == self._employee_id and a.source_key.startswith(prefix)
        ]

    def append_accrual(self, *, amount, accrued_on, bonus_days, source_key) -> BonusAccrual:
        accrual = BonusAccrual(
            accrual_id=len(self._repo.accruals) + 1,
            employee_id=self._employee_id,
            amount=amount,
            accrued_on=accrued_on,
            source_key=source_key,
            bonus_days=bonus_days,
        )
        self._repo.accruals.append(accrual)
        return accrual

    def append_withdrawal(self, *, amount, withdrawn_on, notes) -> BonusWithdrawal:
        withdrawal = BonusWithdrawal(
            withdrawal_id=len(self._repo.withdrawals) + 1,
            employee_id=self._employee_id,
            amount=amount,
            withdrawn_on=withdrawn_on,
            notes=notes,
        )
        self._repo.withdrawals.append(withdrawal)
        return withdrawal


class InMemoryBonus:
    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._locks = _EmployeeLocks()
        self.accruals: list[BonusAccrual] = []
        self.withdrawals: list[BonusWithdrawal] = []
        self.settings: Optional[BonusSettings] = None

    @contextmanager
    def locked(self, employee_id: int):
        if not self._employees.get_by_id(employee_id):
            raise NotFound(f"Employee {employee_id} not found")
        with self._locks.get(employee_id):
            marks = (len(self.accruals), len(self.withdrawals))
            try:
                yield _BonusTx(self, int(employee_id))
            except Exception:
                del self.accruals[marks[0]:]
                del self.withdrawals[marks[1]:]
                raise

    def totals(self, employee_id: int):
        accrued = sum(a.amount for a in self.accruals if a.employee_id == int(employee_id))
        withdrawn = sum(w.amount for w in self.withdrawals if w.employee_id == int(employee_id))
        return float(accrued), float(withdrawn)

    def list_accruals(self, employee_id: int):
        return [a for a in self.accruals if a.employee_id == int(employee_id)]

    def list_withdrawals(self, employee_id: int):
        return [w for w in self.withdrawals if w.employee_id == int(employee_id)]

    def get_settings(self) -> Optional[BonusSettings]:
        return self.settings

    def save_settings(self, settings: BonusSettings) -> None:
        self.settings = settings


class _LoanTx:
    def __init__(self, repo: "InMemoryLoans", employee_id: int):
        self._repo = repo
        self._employee_id = employee_id

    def get_active(self) -> Optional[Loan]:
        return self._repo.get_active(self._employee_id)

    def insert_active(self, *, amount, issued_on) -> Loan:
        loan = Loan(
            loan_id=len(self._repo.loans) + 1,
            employee_id=self._employee_id,
            amount=amount,
            issued_on=issued_on,
        )
        self._repo.loans[loan.loan_id] = loan
        return loan

    def update_active(self, loan_id, *, amount, issued_on) -> Loan:
        loan = replace(self._repo.loans[loan_id], amount=amount, issued_on=issued_on)
        self._repo.loans[loan_id] = loan
        return loan


class InMemoryLoans:
    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._locks = _EmployeeLocks()
        self.loans: dict[int, Loan] = {}

    @contextmanager
    def locked(self, employee_id: int):
        if not self._employees.get_by_id(employee_id):
            raise NotFound(f"Employee {employee_id} not found")
        with self._locks.get(employee_id):
            snapshot = dict(self.loans)
            try:
                yield _LoanTx(self, int(employee_id))
            except Exception:
                self.loans = snapshot
                raise

    def get(self, loan_id: int) -> Optional[Loan]:
        return self.loans.get(int(loan_id))

    def get_active(self, employee_id: int) -> Optional[Loan]:
        return next(
            (l for l in self.loans.values() if l.employee_id == int(employee_id) and l.status == LoanStatus.ACTIVE),
            None,
        )

    def list_for_employee(self, employee_id: int):
        rows = [l for l in self.loans.values() if l.employee_id == int(employee_id)]
        return sorted(rows, key=lambda l: (l.issued_on, l.loan_id), reverse=True)

    def close(self, loan_id: int) -> bool:
        loan = self.loans.get(int(loan_id))
        if not loan or loan.status != LoanStatus.ACTIVE:
            return False
        self.loans[loan.loan_id] = replace(loan, status=LoanStatus.CLOSED)
        return True


class InMemoryDeductions:
    def __init__(self):
        self.rows: dict[int, Deduction] = {}

    def get(self, deduction_id: int) -> Optional[Deduction]:
        return self.rows.get(int(deduction_id))

    def list_active(self, employee_id: int, *, start=None, end=None, deduction_type=None):
        out = []
        for d in self.rows.values():
            if d.employee_id != int(employee_id) or d.status != DeductionStatus.ACTIVE:
                continue
            if start is not None and d.period_start < start:
                continue
            if end is not None and d.period_end > end:
                continue
            if deduction_type is not None and d.deduction_type != deduction_type:
                continue
            out.append(d)
        return sorted(out, key=lambda d: d.deduction_id)

    def add(self, employee_id: int, start: date, end: date, item: NewDeduction) -> Deduction:
        d = Deduction(
            deduction_id=len(self.rows) + 1,
            employee_id=int(employee_id),
            deduction_type=item.deduction_type,
            amount=float(item.amount),
            period_start=start,
            period_end=end,
            description=item.description,
        )
        self.rows[d.deduction_id] = d
        return d

    def cancel(self, deduction_id: int) -> bool:
        d = self.rows.get(int(deduction_id))
        if not d or d.status != DeductionStatus.ACTIVE:
            return False
        self.rows[d.deduction_id] = replace(d, status=DeductionStatus.CANCELLED)
        return True

    def replace_for_period(self, employee_id: int, start: date, end: date, items):
        for d in list(self.rows.values()):
            if (
                d.employee_id == int(employee_id)
                and d.status == DeductionStatus.ACTIVE
                and d.period_start >= start
                and d.period_end <= end
            ):
                self.cancel(d.deduction_id)
        return [self.add(employee_id, start, end, item) for item in items]


class InMemoryPayroll:
    def __init__(self):
        self.rows: dict[tuple[int, date, date], PayrollPeriodSummary] = {}

    def get(self, employee_id: int, start: date, end: date) -> Optional[PayrollPeriodSummary]:
        return self.rows.get((int(employee_id), start, end))

    def list_for_period(self, start: date, end: date):
        return [s for (_, s_start, s_end), s in sorted(self.rows.items()) if s_start == start and s_end == end]

    def save(self, summary: PayrollPeriodSummary) -> PayrollPeriodSummary:
        key = (summary.employee_id, summary.period_start, summary.period_end)
        existing = self.rows.get(key)
        if existing and existing.status == PayrollStatus.PAID:
            return existing
        self.rows[key] = summary
        return summary


class FakeStore:
    """All in-memory repositories over one employee set."""

    def __init__(self, *employees: Employee):
        self.employees = InMemoryEmployees(*employees)
        self.timesheets = InMemoryTimesheets()
        self.bonus = InMemoryBonus(self.employees)
        self.loans = InMemoryLoans(self.employees)
        self.deductions = InMemoryDeductions()
        self.payroll = InMemoryPayroll()

    def container(self, *, excluded_role_keywords=("dev",), default_bonus_settings: BonusSettings = DEFAULT_BONUS):
        return assemble_container(
            employees_repo=self.employees,
            timesheets_repo=self.timesheets,
            bonus_repo=self.bonus,
            loans_repo=self.loans,
            deductions_repo=self.deductions,
            payroll_repo=self.payroll,
            default_bonus_settings=default_bonus_settings,
            excluded_role_keywords=excluded_role_keywords,
        )
