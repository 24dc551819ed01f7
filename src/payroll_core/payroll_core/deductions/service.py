from __future__ import annotations

import logging
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.validators import require_date_range, require_positive_amount
from ..core.enums import DeductionType
from ..core.exceptions import NotFound, ValidationError
from .model import Deduction, NetPay, NewDeduction, OverDeducted
from .repository import DeductionRepository

logger = logging.getLogger(__name__)


class DeductionAggregator:
    """Nets loan, advance and manual deductions against gross pay."""

    def net(self, gross_pay: float, deductions: Iterable[Deduction], start: date, end: date) -> NetPay:
        sums = {t: 0.0 for t in DeductionType}
        for d in deductions:
            if d.within(start, end):
                sums[d.deduction_type] += float(d.amount)

        total = sum(sums.values())
        raw = float(gross_pay) - total
        warning: Optional[OverDeducted] = None
        if raw < 0:
            warning = OverDeducted(
                gross_pay=round(float(gross_pay), 2),
                total_deductions=round(total, 2),
                shortfall=round(-raw, 2),
            )
            logger.warning(
                "deductions %.2f exceed gross pay %.2f for %s..%s; net pay floored at 0",
                total,
                gross_pay,
                start,
                end,
            )

        return NetPay(
            gross_pay=round(float(gross_pay), 2),
            loan=round(sums[DeductionType.LOAN], 2),
            advance=round(sums[DeductionType.ADVANCE], 2),
            manual=round(sums[DeductionType.MANUAL], 2),
            net_pay=round(max(0.0, raw), 2),
            warning=warning,
        )


class DeductionService:
    def __init__(self, deductions: DeductionRepository, *, aggregator: Optional[DeductionAggregator] = None):
        self._deductions = deductions
        self._aggregator = aggregator or DeductionAggregator()

    @staticmethod
    def parse_item(raw: Mapping[str, Any]) -> NewDeduction:
        try:
            deduction_type = DeductionType(str(raw.get("type") or "").lower())
        except ValueError:
            raise ValidationError("Deduction type must be loan, advance or manual")
        description = (raw.get("description") or raw.get("reason") or "").strip() or None
        return NewDeduction(
            deduction_type=deduction_type,
            amount=require_positive_amount(raw.get("amount")),
            description=description,
        )

    def list_for_period(self, employee_id: int, start: date, end: date) -> Sequence[Deduction]:
        require_date_range(start, end)
        return self._deductions.list_active(int(employee_id), start=start, end=end)

    def add(self, employee_id: int, start: date, end: date, item: NewDeduction) -> Deduction:
        require_date_range(start, end)
        require_positive_amount(item.amount)
        saved = self._deductions.add(int(employee_id), start, end, item)
        logger.info("added %s deduction %.2f for employee %s", item.deduction_type.value, item.amount, employee_id)
        return saved

    def replace_for_period(self, employee_id: int, start: date, end: date, items: Sequence[NewDeduction]) -> Sequence[Deduction]:
        require_date_range(start, end)
        for item in items:
            require_positive_amount(item.amount)
        return self._deductions.replace_for_period(int(employee_id), start, end, items)

    def cancel(self, deduction_id: int) -> None:
        if not self._deductions.get(int(deduction_id)):
            raise NotFound(f"Deduction {deduction_id} not found")
        if not self._deductions.cancel(int(deduction_id)):
            raise ValidationError("Deduction is already cancelled")

    def net_for_period(self, employee_id: int, gross_pay: float, start: date, end: date) -> NetPay:
        return self._aggregator.net(gross_pay, self.list_for_period(employee_id, start, end), start, end)
