from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import DeductionStatus, DeductionType


@dataclass(frozen=True)
class Deduction:
    deduction_id: int
    employee_id: int
    deduction_type: DeductionType
    amount: float
    period_start: date
    period_end: date
    description: Optional[str] = None
    status: DeductionStatus = DeductionStatus.ACTIVE

    def within(self, start: date, end: date) -> bool:
        return start <= self.period_start and self.period_end <= end

    def to_dict(self) -> dict:
        return {
            "deduction_id": self.deduction_id,
            "employee_id": self.employee_id,
            "type": self.deduction_type.value,
            "amount": self.amount,
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "description": self.description or "",
            "status": self.status.value,
        }


@dataclass(frozen=True)
class NewDeduction:
    deduction_type: DeductionType
    amount: float
    description: Optional[str] = None


@dataclass(frozen=True)
class OverDeducted:
    """Deductions exceeded gross pay; net pay was floored at 0.

    Reported to the caller, never raised.
    """

    gross_pay: float
    total_deductions: float
    shortfall: float

    def to_dict(self) -> dict:
        return {
            "code": "OverDeducted",
            "gross_pay": self.gross_pay,
            "total_deductions": self.total_deductions,
            "shortfall": self.shortfall,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "OverDeducted":
        return cls(
            gross_pay=float(data["gross_pay"]),
            total_deductions=float(data["total_deductions"]),
            shortfall=float(data["shortfall"]),
        )


@dataclass(frozen=True)
class NetPay:
    gross_pay: float
    loan: float = 0.0
    advance: float = 0.0
    manual: float = 0.0
    net_pay: float = 0.0
    warning: Optional[OverDeducted] = None

    @property
    def total(self) -> float:
        return round(self.loan + self.advance + self.manual, 2)
