from __future__ import annotations

from typing import Optional

from ...core.enums import PayBasis
from ...employees.model import Employee
from .base import RateStrategy, usable


class HourlyRate(RateStrategy):
    basis = PayBasis.HOURLY

    def hourly_rate(self, employee: Employee) -> Optional[float]:
        if not usable(employee.hourly_rate):
            return None
        return float(employee.hourly_rate)
