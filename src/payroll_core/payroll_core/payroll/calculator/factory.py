from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from ...employees.model import Employee
from .base import RateStrategy
from .hourly import HourlyRate
from .monthly_salary import MonthlySalaryRate
from .per_shift import PerShiftRate


def _default_order() -> tuple[RateStrategy, ...]:
    return (PerShiftRate(), HourlyRate(), MonthlySalaryRate())


@dataclass
class RateStrategyFactory:
    """Factory Pattern: strategies to try for an employee, in precedence order.

    The strategy matching the employee's pay basis goes first; the rest
    follow the fixed fallback order PerShift, Hourly, MonthlySalary.
    """

    fallback_order: Sequence[RateStrategy] = field(default_factory=_default_order)

    def ordered_for(self, employee: Employee) -> list[RateStrategy]:
        ordered = list(self.fallback_order)
        if employee.pay_basis is not None:
            ordered.sort(key=lambda s: s.basis != employee.pay_basis)
        return ordered

    def hourly_rate(self, employee: Employee) -> float:
        for strategy in self.ordered_for(employee):
            rate = strategy.hourly_rate(employee)
            if rate is not None:
                return rate
        return 0.0
