from __future__ import annotations

import math
from datetime import date
from typing import Any

from ..core.exceptions import InvalidAmount, ValidationError


def require_positive_amount(value: Any, field_name: str = "amount") -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise InvalidAmount(f"{field_name} must be a number")
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidAmount(f"{field_name} must be greater than 0")
    return amount


def require_date_range(start: date, end: date) -> None:
    if start > end:
        raise ValidationError("Period start must not be after period end")
