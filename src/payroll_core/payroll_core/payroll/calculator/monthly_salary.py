from __future__ import annotations

from typing import Optional

from ...core.constants import MONTHLY_SALARY_DAYS, MONTHLY_SALARY_HOURS_PER_DAY
from ...core.enums import PayBasis
from ...employees.model import Employee
from .base import RateStrategy, usable


class MonthlySalaryRate(RateStrategy):
    """Implied hourly rate: salary / 30 days / 8 hours."""

    basis = PayBasis.MONTHLY_SALARY

    def hourly_rate(self, employee: Employee) -> Optional[float]:
        if not usable(employee.monthly_salary):
            return None
        return float(employee.monthly_salary) / MONTHLY_SALARY_DAYS / MONTHLY_SALARY_HOURS_PER_DAY
