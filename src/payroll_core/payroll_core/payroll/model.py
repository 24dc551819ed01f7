from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import PayrollStatus
from ..deductions.model import OverDeducted


@dataclass(frozen=True)
class DailyEarnings:
    work_date: date
    billable_minutes: int = 0
    regular_minutes: int = 0
    overtime_minutes: int = 0
    hourly_rate: float = 0.0
    amount: float = 0.0

    @property
    def billable_hours(self) -> float:
        return self.billable_minutes / 60


@dataclass(frozen=True)
class PayrollPeriodSummary:
    employee_id: int
    period_start: date
    period_end: date
    gross_pay: float
    loan_deduction: float = 0.0
    advance_deduction: float = 0.0
    manual_deduction: float = 0.0
    total_deductions: float = 0.0
    net_pay: float = 0.0
    working_days: int = 0
    billable_minutes: int = 0
    overtime_minutes: int = 0
    hourly_rate: float = 0.0
    status: PayrollStatus = PayrollStatus.PENDING
    warnings: tuple[OverDeducted, ...] = field(default_factory=tuple)
    paid_at: Optional[str] = None

    @property
    def over_deducted(self) -> bool:
        return bool(self.warnings)

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "gross_pay": self.gross_pay,
            "loan_deduction": self.loan_deduction,
            "advance_deduction": self.advance_deduction,
            "manual_deduction": self.manual_deduction,
            "total_deductions": self.total_deductions,
            "net_pay": self.net_pay,
            "working_days": self.working_days,
            "billable_minutes": self.billable_minutes,
            "overtime_minutes": self.overtime_minutes,
            "hourly_rate": self.hourly_rate,
            "status": self.status.value,
            "warnings": [w.to_dict() for w in self.warnings],
            "paid_at": self.paid_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PayrollPeriodSummary":
        return cls(
            employee_id=int(data["employee_id"]),
            period_start=date.fromisoformat(data["period_start"]),
            period_end=date.fromisoformat(data["period_end"]),
            gross_pay=float(data["gross_pay"]),
            loan_deduction=float(data.get("loan_deduction", 0)),
            advance_deduction=float(data.get("advance_deduction", 0)),
            manual_deduction=float(data.get("manual_deduction", 0)),
            total_deductions=float(data.get("total_deductions", 0)),
            net_pay=float(data.get("net_pay", 0)),
            working_days=int(data.get("working_days", 0)),
            billable_minutes=int(data.get("billable_minutes", 0)),
            overtime_minutes=int(data.get("overtime_minutes", 0)),
            hourly_rate=float(data.get("hourly_rate", 0)),
            status=PayrollStatus(data.get("status", PayrollStatus.PENDING.value)),
            warnings=tuple(OverDeducted.from_dict(w) for w in data.get("warnings", ())),
            paid_at=data.get("paid_at"),
        )
