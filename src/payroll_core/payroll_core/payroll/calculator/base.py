from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ...core.enums import PayBasis
from ...employees.model import Employee


class RateStrategy(ABC):
    """Strategy Pattern: derive an hourly rate from one pay basis."""

    basis: PayBasis

    @abstractmethod
    def hourly_rate(self, employee: Employee) -> Optional[float]:
        """Hourly rate, or None when the employee has no usable value for this basis."""

        raise NotImplementedError


def usable(amount: Optional[float]) -> bool:
    return amount is not None and amount > 0
