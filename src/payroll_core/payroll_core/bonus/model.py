from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

PERIOD_KEY_PREFIX = "period:"


def period_source_key(start: date, end: date) -> str:
    return f"{PERIOD_KEY_PREFIX}{start.isoformat()}:{end.isoformat()}"


def parse_period_key(source_key: str) -> Optional[tuple[date, date]]:
    """Date range of a period accrual key, or None for any other key."""
    if not source_key.startswith(PERIOD_KEY_PREFIX):
        return None
    try:
        start, end = source_key[len(PERIOD_KEY_PREFIX):].split(":")
        return date.fromisoformat(start), date.fromisoformat(end)
    except ValueError:
        return None


@dataclass(frozen=True)
class BonusSettings:
    """Bonus window and daily rate (stored under the 'bonus' settings key)."""

    start_date: date
    end_date: date
    amount_per_day: float

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def to_dict(self) -> dict:
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "amount_per_day": self.amount_per_day,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "BonusSettings":
        return cls(
            start_date=date.fromisoformat(str(data["start_date"])),
            end_date=date.fromisoformat(str(data["end_date"])),
            amount_per_day=float(data["amount_per_day"]),
        )


@dataclass(frozen=True)
class BonusAccrual:
    accrual_id: int
    employee_id: int
    amount: float
    accrued_on: date
    source_key: str
    bonus_days: int = 0

    def to_dict(self) -> dict:
        return {
            "accrual_id": self.accrual_id,
            "amount": self.amount,
            "accrued_on": self.accrued_on.isoformat(),
            "bonus_days": self.bonus_days,
            "source_key": self.source_key,
        }


@dataclass(frozen=True)
class BonusWithdrawal:
    """Append-only: never updated or deleted."""

    withdrawal_id: int
    employee_id: int
    amount: float
    withdrawn_on: date
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "withdrawal_id": self.withdrawal_id,
            "amount": self.amount,
            "date": self.withdrawn_on.isoformat(),
            "notes": self.notes or "",
        }


@dataclass(frozen=True)
class WithdrawalResult:
    withdrawal: BonusWithdrawal
    balance: float


@dataclass(frozen=True)
class BonusStatement:
    employee_id: int
    total_accrued: float
    total_withdrawn: float
    balance: float
    accruals: tuple[BonusAccrual, ...] = ()
    withdrawals: tuple[BonusWithdrawal, ...] = ()

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "total_accrued": self.total_accrued,
            "total_withdrawn": self.total_withdrawn,
            "balance": self.balance,
            "accruals": [a.to_dict() for a in self.accruals],
            "withdrawals": [w.to_dict() for w in self.withdrawals],
        }
