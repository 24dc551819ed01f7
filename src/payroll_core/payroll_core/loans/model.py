from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import LoanStatus


@dataclass(frozen=True)
class Loan:
    loan_id: int
    employee_id: int
    amount: float
    issued_on: date
    status: LoanStatus = LoanStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == LoanStatus.ACTIVE

    def to_dict(self) -> dict:
        return {
            "loan_id": self.loan_id,
            "employee_id": self.employee_id,
            "amount": self.amount,
            "date": self.issued_on.isoformat(),
            "status": self.status.value,
        }


@dataclass(frozen=True)
class LoanSummary:
    """Repayment position of the active loan for one payroll period."""

    loan_id: int
    loan_date: date
    original_amount: float
    opening_balance: float
    current_deduction: float
    remaining_balance: float

    def to_dict(self) -> dict:
        return {
            "loan_id": self.loan_id,
            "loan_date": self.loan_date.isoformat(),
            "original_amount": self.original_amount,
            "opening_balance": self.opening_balance,
            "current_deduction": self.current_deduction,
            "remaining_balance": self.remaining_balance,
        }
