from __future__ import annotations

from typing import Optional

from ...core.enums import PayBasis
from ...employees.model import Employee
from ..time_arithmetic import standard_shift_hours
from .base import RateStrategy, usable


class PerShiftRate(RateStrategy):
    """Flat amount per shift spread over the standard shift length."""

    basis = PayBasis.PER_SHIFT

    def hourly_rate(self, employee: Employee) -> Optional[float]:
        if not usable(employee.per_shift_amount):
            return None
        return float(employee.per_shift_amount) / standard_shift_hours(employee)
