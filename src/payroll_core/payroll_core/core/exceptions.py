from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence


@dataclass(frozen=True)
class FieldError:
    """One failed field of one submitted row."""

    row: int
    field: str
    message: str
    entry_date: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            "row": self.row,
            "field": self.field,
            "message": self.message,
            "date": self.entry_date.isoformat() if self.entry_date else None,
        }


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, errors: Sequence[FieldError] = ()):
        super().__init__(message)
        self.errors = tuple(errors)


class InvalidAmount(ValidationError):
    """Raised for zero or negative money amounts."""


class InsufficientBalance(DomainError):
    """Raised when a bonus withdrawal exceeds the derived balance."""

    def __init__(self, *, balance: float, requested: float):
        super().__init__(f"Requested {requested:.2f} exceeds available bonus balance {balance:.2f}")
        self.balance = balance
        self.requested = requested


class InvariantViolation(DomainError):
    """Ledger math implies an impossible state. Never auto-corrected."""


class NotFound(DomainError):
    """Referenced employee, loan or entry does not exist."""
