from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Any, Optional

from flask import jsonify, request

from ..core.exceptions import InsufficientBalance, InvariantViolation, NotFound, ValidationError
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def ok(status: int = 200, **payload: Any):
    return jsonify({"success": True, **payload}), status


def fail(message: str, status: int, **payload: Any):
    return jsonify({"success": False, "message": message, **payload}), status


def api_errors(view):
    """Translate domain exceptions raised by a JSON view into error responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            return fail(str(e), 400, errors=[err.to_dict() for err in e.errors])
        except InsufficientBalance as e:
            return fail(str(e), 409, balance=e.balance, requested=e.requested)
        except NotFound as e:
            return fail(str(e), 404)
        except InvariantViolation as e:
            logger.error("invariant violation in %s: %s", request.path, e)
            return fail(str(e), 500)

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def parse_date_arg(value: Any, field_name: str, *, default: Optional[date] = None) -> date:
    if value in (None, ""):
        if default is not None:
            return default
        raise ValidationError(f"{field_name} is required (YYYY-MM-DD)")
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be a date in YYYY-MM-DD format")


def period_from(source) -> tuple[date, date]:
    """Read 'start' and 'end' from query args or a JSON body."""
    return parse_date_arg(source.get("start"), "start"), parse_date_arg(source.get("end"), "end")


def int_arg(value: Any, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def int_list(value: Any, field_name: str) -> list[int]:
    """Accept a JSON list or a comma separated string of ids."""
    if value in (None, ""):
        return []
    if isinstance(value, str):
        value = [v for v in value.split(",") if v.strip()]
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{field_name} must be a list of ids")
    return [int_arg(v, field_name) for v in value]
