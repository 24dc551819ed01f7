from __future__ import annotations

from datetime import date
from typing import ContextManager, Optional, Protocol, Sequence

from .model import Loan


class LoanTx(Protocol):
    """Loan rows of one employee inside a transaction holding the employee's lock."""

    def get_active(self) -> Optional[Loan]:
        raise NotImplementedError

    def insert_active(self, *, amount: float, issued_on: date) -> Loan:
        raise NotImplementedError

    def update_active(self, loan_id: int, *, amount: float, issued_on: date) -> Loan:
        raise NotImplementedError


class LoanRepository(Protocol):
    def locked(self, employee_id: int) -> ContextManager[LoanTx]:
        raise NotImplementedError

    def get(self, loan_id: int) -> Optional[Loan]:
        raise NotImplementedError

    def get_active(self, employee_id: int) -> Optional[Loan]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[Loan]:
        raise NotImplementedError

    def close(self, loan_id: int) -> bool:
        """Flip an active loan to closed; False when it was not active."""

        raise NotImplementedError
