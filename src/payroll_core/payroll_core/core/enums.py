from __future__ import annotations

from enum import Enum


class PayBasis(str, Enum):
    """Salary model used to derive an hourly rate."""

    PER_SHIFT = "PerShift"
    HOURLY = "Hourly"
    MONTHLY_SALARY = "MonthlySalary"


class EmployeeStatus(str, Enum):
    ACTIVE = "Active"
    RESIGNED = "Resigned"


class DayType(str, Enum):
    WORK = "Work"
    TRAVEL = "Travel"


class EntryStatus(str, Enum):
    """Lifecycle of a timesheet row (rows are superseded, never deleted)."""

    NEW = "New"
    ACTIVE = "Active"
    EDITED = "Edited"


class LoanStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class DeductionType(str, Enum):
    LOAN = "loan"
    ADVANCE = "advance"
    MANUAL = "manual"


class DeductionStatus(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"


class PayrollStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"
