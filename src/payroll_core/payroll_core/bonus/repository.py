from __future__ import annotations

from datetime import date
from typing import ContextManager, Optional, Protocol, Sequence

from .model import BonusAccrual, BonusSettings, BonusWithdrawal


class BonusLedgerTx(Protocol):
    """Ledger view inside one transaction holding the employee's lock."""

    def totals(self) -> tuple[float, float]:
        """(total accrued, total withdrawn) as seen inside the transaction."""

        raise NotImplementedError

    def has_source(self, source_key: str) -> bool:
        raise NotImplementedError

    def source_keys(self, prefix: str) -> Sequence[str]:
        """Source keys of the employee's accruals starting with prefix."""

        raise NotImplementedError

    def append_accrual(self, *, amount: float, accrued_on: date, bonus_days: int, source_key: str) -> BonusAccrual:
        raise NotImplementedError

    def append_withdrawal(self, *, amount: float, withdrawn_on: date, notes: Optional[str]) -> BonusWithdrawal:
        raise NotImplementedError


class BonusRepository(Protocol):
    def locked(self, employee_id: int) -> ContextManager[BonusLedgerTx]:
        """Open a transaction and lock the employee's ledger; commits on clean exit."""

        raise NotImplementedError

    def totals(self, employee_id: int) -> tuple[float, float]:
        raise NotImplementedError

    def list_accruals(self, employee_id: int) -> Sequence[BonusAccrual]:
        raise NotImplementedError

    def list_withdrawals(self, employee_id: int) -> Sequence[BonusWithdrawal]:
        raise NotImplementedError

    def get_settings(self) -> Optional[BonusSettings]:
        raise NotImplementedError

    def save_settings(self, settings: BonusSettings) -> None:
        raise NotImplementedError
