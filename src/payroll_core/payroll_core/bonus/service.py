from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import overlap, parse_iso_date
from ..common.validators import require_positive_amount
from ..core.exceptions import InsufficientBalance, InvalidAmount, InvariantViolation, ValidationError
from .model import (
    PERIOD_KEY_PREFIX,
    BonusAccrual,
    BonusSettings,
    BonusStatement,
    WithdrawalResult,
    parse_period_key,
    period_source_key,
)
from .repository import BonusRepository

logger = logging.getLogger(__name__)


class BonusLedger:
    """Append-only accrual/withdrawal ledger; the balance is always derived.

    balance = sum(accruals) - sum(withdrawals), never stored.
    """

    def __init__(self, bonus: BonusRepository, *, default_settings: BonusSettings):
        self._bonus = bonus
        self._default_settings = default_settings

    # -------- settings --------
    def get_settings(self) -> BonusSettings:
        return self._bonus.get_settings() or self._default_settings

    def update_settings(self, raw: Mapping[str, Any]) -> BonusSettings:
        try:
            start = parse_iso_date(str(raw.get("start_date") or ""))
            end = parse_iso_date(str(raw.get("end_date") or ""))
        except ValueError:
            raise ValidationError("Bonus window dates must be YYYY-MM-DD")
        if start > end:
            raise ValidationError("Bonus window start must not be after its end")
        settings = BonusSettings(
            start_date=start,
            end_date=end,
            amount_per_day=require_positive_amount(raw.get("amount_per_day"), "amount_per_day"),
        )
        self._bonus.save_settings(settings)
        logger.info("bonus settings updated: %s", settings.to_dict())
        return settings

    # -------- balance --------
    @staticmethod
    def _checked_balance(employee_id: int, accrued: float, withdrawn: float) -> float:
        balance = round(accrued - withdrawn, 2)
        if balance < 0:
            logger.error(
                "bonus ledger of employee %s is negative: accrued=%.2f withdrawn=%.2f",
                employee_id,
                accrued,
                withdrawn,
            )
            raise InvariantViolation(f"Bonus balance of employee {employee_id} is negative ({balance:.2f})")
        return balance

    def current_balance(self, employee_id: int) -> float:
        accrued, withdrawn = self._bonus.totals(int(employee_id))
        return self._checked_balance(int(employee_id), accrued, withdrawn)

    def company_total_balance(self, employee_ids: Iterable[int]) -> float:
        return round(sum(self.current_balance(e) for e in employee_ids), 2)

    def statement(self, employee_id: int) -> BonusStatement:
        accruals = tuple(self._bonus.list_accruals(int(employee_id)))
        withdrawals = tuple(self._bonus.list_withdrawals(int(employee_id)))
        accrued = round(sum(a.amount for a in accruals), 2)
        withdrawn = round(sum(w.amount for w in withdrawals), 2)
        return BonusStatement(
            employee_id=int(employee_id),
            total_accrued=accrued,
            total_withdrawn=withdrawn,
            balance=self._checked_balance(int(employee_id), accrued, withdrawn),
            accruals=accruals,
            withdrawals=withdrawals,
        )

    # -------- mutations --------
    def accrue(
        self,
        employee_id: int,
        amount: float,
        accrued_on: date,
        *,
        bonus_days: int = 0,
        source_key: Optional[str] = None,
    ) -> Optional[BonusAccrual]:
        """Append an accrual. A source_key already on the ledger is skipped, never re-added."""
        if amount is None or float(amount) < 0:
            raise InvalidAmount("Accrual amount cannot be negative")
        key = source_key or f"manual:{uuid.uuid4().hex}"

        with self._bonus.locked(int(employee_id)) as ledger:
            if ledger.has_source(key):
                logger.warning("bonus accrual %s for employee %s already recorded; skipped", key, employee_id)
                return None
            accrual = ledger.append_accrual(
                amount=round(float(amount), 2),
                accrued_on=accrued_on,
                bonus_days=int(bonus_days),
                source_key=key,
            )
        logger.info("bonus accrued for employee %s: %.2f (%s)", employee_id, accrual.amount, key)
        return accrual

    def accrue_from_attendance(
        self,
        employee_id: int,
        bonus_days: int,
        accrued_on: date,
        *,
        source_key: str,
        settings: Optional[BonusSettings] = None,
    ) -> Optional[BonusAccrual]:
        settings = settings or self.get_settings()
        if int(bonus_days) < 0:
            raise ValidationError("Bonus days cannot be negative")
        return self.accrue(
            employee_id,
            int(bonus_days) * settings.amount_per_day,
            accrued_on,
            bonus_days=int(bonus_days),
            source_key=source_key,
        )

    def accrue_period(
        self,
        employee_id: int,
        start: date,
        end: date,
        count_bonus_days: Callable[[Sequence[tuple[date, date]]], int],
        *,
        settings: Optional[BonusSettings] = None,
    ) -> Optional[BonusAccrual]:
        """Accrue a period, counting only days no earlier period accrual covers.

        count_bonus_days receives the already-accrued ranges overlapping
        [start, end] and returns the bonus days left to pay.
        """
        settings = settings or self.get_settings()
        key = period_source_key(start, end)

        with self._bonus.locked(int(employee_id)) as ledger:
            covered = []
            for existing in ledger.source_keys(PERIOD_KEY_PREFIX):
                span = parse_period_key(existing)
                if span and overlap(start, end, *span):
                    covered.append(span)
            bonus_days = int(count_bonus_days(covered))
            if bonus_days <= 0 or ledger.has_source(key):
                logger.debug("no new bonus days for employee %s in %s..%s", employee_id, start, end)
                return None
            accrual = ledger.append_accrual(
                amount=round(bonus_days * settings.amount_per_day, 2),
                accrued_on=end,
                bonus_days=bonus_days,
                source_key=key,
            )
        logger.info("bonus accrued for employee %s: %.2f (%s)", employee_id, accrual.amount, key)
        return accrual

    def withdraw(self, employee_id: int, amount: Any, withdrawn_on: date, notes: Optional[str] = None) -> WithdrawalResult:
        amount = round(require_positive_amount(amount), 2)
        notes = (notes or "").strip() or None

        with self._bonus.locked(int(employee_id)) as ledger:
            accrued, withdrawn = ledger.totals()
            balance = self._checked_balance(int(employee_id), accrued, withdrawn)
            if amount > balance:
                raise InsufficientBalance(balance=balance, requested=amount)
            withdrawal = ledger.append_withdrawal(amount=amount, withdrawn_on=withdrawn_on, notes=notes)

        new_balance = round(balance - amount, 2)
        logger.info("bonus withdrawal %.2f for employee %s; balance now %.2f", amount, employee_id, new_balance)
        return WithdrawalResult(withdrawal=withdrawal, balance=new_balance)
