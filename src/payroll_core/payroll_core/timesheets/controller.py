from __future__ import annotations

from flask import Flask, request

from ..common.http import api_errors, fail, json_body, ok, parse_date_arg, period_from
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/timesheets/<int:employee_id>", methods=["GET"], endpoint="api_timesheets_list")
    @api_errors
    def api_timesheets_list(employee_id: int):
        start, end = period_from(request.args)
        entries = container.timesheet_service.list_for_period(employee_id, start, end)
        return ok(entries=[e.to_dict() for e in entries])

    @app.route("/api/timesheets/<int:employee_id>", methods=["PUT"], endpoint="api_timesheets_save")
    @api_errors
    def api_timesheets_save(employee_id: int):
        rows = json_body().get("entries") or []
        if not isinstance(rows, list):
            return fail("entries must be a list", 400, errors=[])

        result = container.timesheet_service.save_entries(employee_id, rows)
        # Valid rows are kept even when others fail, so the body always lists both.
        return (
            {
                "success": result.ok,
                "message": "Saved" if result.ok else "Some rows were not saved",
                "saved": [e.to_dict() for e in result.saved],
                "errors": [err.to_dict() for err in result.errors],
            },
            200 if result.ok else 400,
        )

    @app.route("/api/timesheets/<int:employee_id>/open-period", methods=["POST"], endpoint="api_timesheets_open_period")
    @api_errors
    def api_timesheets_open_period(employee_id: int):
        start, end = period_from(json_body())
        created = container.timesheet_service.open_period(employee_id, start, end)
        return ok(201 if created else 200, created=created)

    @app.route("/api/timesheets/<int:employee_id>/revisions", methods=["GET"], endpoint="api_timesheets_revisions")
    @api_errors
    def api_timesheets_revisions(employee_id: int):
        work_date = parse_date_arg(request.args.get("date"), "date")
        revisions = container.timesheet_service.revisions(employee_id, work_date)
        return ok(revisions=[r.to_dict() for r in revisions])
