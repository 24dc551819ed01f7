from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import DeductionType
from .model import Deduction, NewDeduction


class DeductionRepository(Protocol):
    def get(self, deduction_id: int) -> Optional[Deduction]:
        raise NotImplementedError

    def list_active(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        deduction_type: Optional[DeductionType] = None,
    ) -> Sequence[Deduction]:
        """Active rows whose period lies within [start, end] (bounds optional)."""

        raise NotImplementedError

    def add(self, employee_id: int, start: date, end: date, item: NewDeduction) -> Deduction:
        raise NotImplementedError

    def cancel(self, deduction_id: int) -> bool:
        raise NotImplementedError

    def replace_for_period(self, employee_id: int, start: date, end: date, items: Sequence[NewDeduction]) -> Sequence[Deduction]:
        """Cancel the period's active rows and add ``items``, in one transaction."""

        raise NotImplementedError
