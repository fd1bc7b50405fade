from __future__ import annotations

from flask import Flask, g, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import handles_errors, json_fail, json_ok, make_guards
from ..container import Container
from .service import render_csv, report_filename


def register(app: Flask, container: Container) -> None:
    _, admin_required = make_guards(container.session_resolver)

    @app.route("/admin/dashboard", methods=["GET"], endpoint="admin_dashboard")
    @handles_errors("System error while loading the admin dashboard")
    @admin_required
    def admin_dashboard():
        counts = container.aggregation_service.dashboard_counts(g.actor)
        return json_ok(counts=counts)

    @app.route("/admin/report.csv", methods=["GET"], endpoint="attendance_report_csv")
    @handles_errors("System error while generating the report")
    @admin_required
    def attendance_report_csv():
        start_s = request.args.get("start")
        end_s = request.args.get("end")
        if not start_s or not end_s:
            return json_fail("Please select both start and end dates", 400)

        start, end = parse_iso_date(start_s), parse_iso_date(end_s)
        report = container.aggregation_service.generate_attendance_report(g.actor, start=start, end=end)
        return app.response_class(
            render_csv(report).encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={report_filename(start, end)}"},
        )
