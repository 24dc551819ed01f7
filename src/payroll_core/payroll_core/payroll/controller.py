from __future__ import annotations

from flask import Flask, request, send_file

from ..common.http import api_errors, int_arg, int_list, json_body, ok, period_from
from ..container import Container
from .export import XLSX_MIMETYPE


def register(app: Flask, container: Container) -> None:
    def _all_active_ids() -> list[int]:
        return [e.employee_id for e in container.employees_repo.list_all(active_only=True)]

    def _summary_body(source, *, store: bool):
        employee_id = int_arg(source.get("employee_id"), "employee_id")
        start, end = period_from(source)
        summary = container.payroll_service.compute_period_summary(employee_id, start, end, store=store)
        days = container.payroll_service.daily_breakdown(employee_id, start, end)
        loan = container.loan_ledger.repayment_summary(employee_id, start, end)
        return ok(
            summary=summary.to_dict(),
            days=[
                {
                    "date": d.work_date.isoformat(),
                    "billable_hours": round(d.billable_hours, 2),
                    "regular_minutes": d.regular_minutes,
                    "overtime_minutes": d.overtime_minutes,
                    "amount": d.amount,
                }
                for d in days
            ],
            loan=loan.to_dict() if loan else None,
        )

    # GET previews the period without writing; POST stores the Pending snapshot.
    @app.route("/api/payroll/summary", methods=["GET"], endpoint="api_payroll_summary")
    @api_errors
    def api_payroll_summary():
        return _summary_body(request.args, store=False)

    @app.route("/api/payroll/summary", methods=["POST"], endpoint="api_payroll_summary_store")
    @api_errors
    def api_payroll_summary_store():
        return _summary_body(json_body(), store=True)

    @app.route("/api/payroll/period", methods=["GET"], endpoint="api_payroll_period")
    @api_errors
    def api_payroll_period():
        start, end = period_from(request.args)
        return ok(summaries=[s.to_dict() for s in container.payroll_service.list_period(start, end)])

    @app.route("/api/payroll/mark-paid", methods=["POST"], endpoint="api_payroll_mark_paid")
    @api_errors
    def api_payroll_mark_paid():
        data = json_body()
        start, end = period_from(data)
        employee_ids = int_list(data.get("employee_ids"), "employee_ids") or _all_active_ids()
        paid = container.payroll_service.mark_paid(employee_ids, start, end)
        return ok(summaries=[s.to_dict() for s in paid])

    @app.route("/api/payroll/export", methods=["GET"], endpoint="api_payroll_export")
    @api_errors
    def api_payroll_export():
        start, end = period_from(request.args)
        employee_ids = int_list(request.args.get("employee_ids"), "employee_ids") or _all_active_ids()
        output = container.payroll_service.export_period(employee_ids, start, end)
        return send_file(
            output,
            download_name=f"payroll_{start.isoformat()}_{end.isoformat()}.xlsx",
            as_attachment=True,
            mimetype=XLSX_MIMETYPE,
        )
