from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.http import api_errors, json_body, ok, parse_date_arg, period_from
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/loans/<int:employee_id>/active", methods=["GET"], endpoint="api_loans_active")
    @api_errors
    def api_loans_active(employee_id: int):
        loan = container.loan_ledger.get_active_loan(employee_id)
        summary = None
        if loan and request.args.get("start") and request.args.get("end"):
            start, end = period_from(request.args)
            summary = container.loan_ledger.repayment_summary(employee_id, start, end)
        return ok(
            loan=loan.to_dict() if loan else None,
            summary=summary.to_dict() if summary else None,
        )

    @app.route("/api/loans/<int:employee_id>", methods=["GET"], endpoint="api_loans_history")
    @api_errors
    def api_loans_history(employee_id: int):
        return ok(loans=[loan.to_dict() for loan in container.loan_ledger.history(employee_id)])

    @app.route("/api/loans/<int:employee_id>", methods=["POST"], endpoint="api_loans_issue")
    @api_errors
    def api_loans_issue(employee_id: int):
        data = json_body()
        issued_on = parse_date_arg(data.get("date"), "date", default=now_local().date())
        loan = container.loan_ledger.issue_or_update(employee_id, data.get("amount"), issued_on)
        return ok(loan=loan.to_dict())

    @app.route("/api/loans/<int:loan_id>/close", methods=["POST"], endpoint="api_loans_close")
    @api_errors
    def api_loans_close(loan_id: int):
        loan = container.loan_ledger.close(loan_id)
        return ok(loan=loan.to_dict())
