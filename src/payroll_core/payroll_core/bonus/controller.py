from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import now_local
from ..common.http import api_errors, json_body, ok, parse_date_arg, period_from
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/bonus/<int:employee_id>", methods=["GET"], endpoint="api_bonus_statement")
    @api_errors
    def api_bonus_statement(employee_id: int):
        statement = container.bonus_ledger.statement(employee_id)
        return ok(**statement.to_dict())

    @app.route("/api/bonus/<int:employee_id>/withdrawals", methods=["POST"], endpoint="api_bonus_withdraw")
    @api_errors
    def api_bonus_withdraw(employee_id: int):
        data = json_body()
        withdrawn_on = parse_date_arg(data.get("date"), "date", default=now_local().date())
        result = container.bonus_ledger.withdraw(employee_id, data.get("amount"), withdrawn_on, data.get("notes"))
        return ok(201, withdrawal=result.withdrawal.to_dict(), balance=result.balance)

    @app.route("/api/bonus/<int:employee_id>/accrue-period", methods=["POST"], endpoint="api_bonus_accrue_period")
    @api_errors
    def api_bonus_accrue_period(employee_id: int):
        start, end = period_from(json_body())
        accrual = container.payroll_service.accrue_period_bonus(employee_id, start, end)
        return ok(
            201 if accrual else 200,
            accrual=accrual.to_dict() if accrual else None,
            balance=container.bonus_ledger.current_balance(employee_id),
        )

    @app.route("/api/settings/bonus", methods=["GET"], endpoint="api_bonus_settings")
    @api_errors
    def api_bonus_settings():
        return ok(settings=container.bonus_ledger.get_settings().to_dict())

    @app.route("/api/settings/bonus", methods=["PUT"], endpoint="api_bonus_settings_update")
    @api_errors
    def api_bonus_settings_update():
        settings = container.bonus_ledger.update_settings(json_body())
        return ok(settings=settings.to_dict())
