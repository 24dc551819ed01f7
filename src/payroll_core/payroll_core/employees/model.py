from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..core.enums import EmployeeStatus, PayBasis


@dataclass(frozen=True)
class Employee:
    """Pay configuration of an employee.

    Owned by the employee-management module; payroll only reads it.
    Only the amount matching ``pay_basis`` is normally set, the others are
    consulted in the calculator's fallback order.
    """

    employee_id: int
    name: str
    role: str = ""
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    pay_basis: Optional[PayBasis] = None
    shift_start: Optional[time] = None
    shift_end: Optional[time] = None
    break_minutes: int = 0
    per_shift_amount: Optional[float] = None
    hourly_rate: Optional[float] = None
    monthly_salary: Optional[float] = None

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE

    @property
    def has_shift(self) -> bool:
        return self.shift_start is not None and self.shift_end is not None
