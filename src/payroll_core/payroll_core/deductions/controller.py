from __future__ import annotations

from flask import Flask, request

from ..common.http import api_errors, json_body, ok, period_from
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/deductions/<int:employee_id>", methods=["GET"], endpoint="api_deductions_list")
    @api_errors
    def api_deductions_list(employee_id: int):
        start, end = period_from(request.args)
        items = container.deduction_service.list_for_period(employee_id, start, end)
        return ok(deductions=[d.to_dict() for d in items])

    @app.route("/api/deductions/<int:employee_id>", methods=["PUT"], endpoint="api_deductions_replace")
    @api_errors
    def api_deductions_replace(employee_id: int):
        data = json_body()
        start, end = period_from(data)
        raw_items = data.get("items") or []
        if not isinstance(raw_items, list):
            raise ValidationError("items must be a list")
        items = [container.deduction_service.parse_item(raw) for raw in raw_items]
        saved = container.deduction_service.replace_for_period(employee_id, start, end, items)
        return ok(deductions=[d.to_dict() for d in saved])

    @app.route("/api/deductions/item/<int:deduction_id>/cancel", methods=["POST"], endpoint="api_deductions_cancel")
    @api_errors
    def api_deductions_cancel(deduction_id: int):
        container.deduction_service.cancel(deduction_id)
        return ok(message="Deduction cancelled")
