from __future__ import annotations

from flask import Flask, request

from ..common.http import api_errors, int_arg, ok, period_from
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/score", methods=["GET"], endpoint="api_reports_score")
    @api_errors
    def api_reports_score():
        employee_id = int_arg(request.args.get("employee_id"), "employee_id")
        start, end = period_from(request.args)
        record = container.report_service.compute_score(employee_id, start, end)
        return ok(score=record.to_dict())

    @app.route("/api/reports/leaderboard", methods=["GET"], endpoint="api_reports_leaderboard")
    @api_errors
    def api_reports_leaderboard():
        start, end = period_from(request.args)
        board = container.report_service.compute_leaderboard(start, end)
        return ok(**board.to_dict())
