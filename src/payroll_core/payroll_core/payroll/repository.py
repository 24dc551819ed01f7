from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import PayrollPeriodSummary


class PayrollRepository(Protocol):
    def get(self, employee_id: int, start: date, end: date) -> Optional[PayrollPeriodSummary]:
        raise NotImplementedError

    def list_for_period(self, start: date, end: date) -> Sequence[PayrollPeriodSummary]:
        raise NotImplementedError

    def save(self, summary: PayrollPeriodSummary) -> PayrollPeriodSummary:
        """Upsert the snapshot for (employee_id, period_start, period_end).

        A Paid snapshot is never overwritten; the stored one is returned instead.
        """

        raise NotImplementedError
