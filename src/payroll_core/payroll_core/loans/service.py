from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Optional, Sequence

from ..common.validators import require_date_range, require_positive_amount
from ..core.enums import DeductionType
from ..core.exceptions import NotFound, ValidationError
from ..deductions.repository import DeductionRepository
from .model import Loan, LoanSummary
from .repository import LoanRepository

logger = logging.getLogger(__name__)


class LoanLedger:
    """At most one active loan per employee; closed loans are immutable."""

    def __init__(self, loans: LoanRepository, deductions: DeductionRepository):
        self._loans = loans
        self._deductions = deductions

    def get_active_loan(self, employee_id: int) -> Optional[Loan]:
        return self._loans.get_active(int(employee_id))

    def history(self, employee_id: int) -> Sequence[Loan]:
        return self._loans.list_for_employee(int(employee_id))

    def issue_or_update(self, employee_id: int, amount: Any, issued_on: date) -> Loan:
        amount = round(require_positive_amount(amount), 2)

        with self._loans.locked(int(employee_id)) as tx:
            active = tx.get_active()
            if active is None:
                loan = tx.insert_active(amount=amount, issued_on=issued_on)
                action = "issued"
            else:
                loan = tx.update_active(active.loan_id, amount=amount, issued_on=issued_on)
                action = "updated"

        logger.info("loan %s %s for employee %s: %.2f on %s", loan.loan_id, action, employee_id, amount, issued_on)
        return loan

    def close(self, loan_id: int) -> Loan:
        loan = self._loans.get(int(loan_id))
        if loan is None:
            raise NotFound(f"Loan {loan_id} not found")
        if not loan.is_active or not self._loans.close(loan.loan_id):
            raise ValidationError("Loan is already closed")
        logger.info("loan %s of employee %s closed", loan.loan_id, loan.employee_id)
        return self._loans.get(loan.loan_id) or loan

    def repayment_summary(self, employee_id: int, period_start: date, period_end: date) -> Optional[LoanSummary]:
        require_date_range(period_start, period_end)
        loan = self.get_active_loan(employee_id)
        if loan is None:
            return None

        earlier = self._deductions.list_active(
            int(employee_id),
            end=period_start - timedelta(days=1),
            deduction_type=DeductionType.LOAN,
        )
        current = self._deductions.list_active(
            int(employee_id),
            start=period_start,
            end=period_end,
            deduction_type=DeductionType.LOAN,
        )
        repaid = sum(d.amount for d in earlier)
        this_period = round(sum(d.amount for d in current), 2)
        opening = round(loan.amount - repaid, 2)
        return LoanSummary(
            loan_id=loan.loan_id,
            loan_date=loan.issued_on,
            original_amount=loan.amount,
            opening_balance=opening,
            current_deduction=this_period,
            remaining_balance=round(max(0.0, opening - this_period), 2),
        )
