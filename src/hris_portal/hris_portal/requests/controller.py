from __future__ import annotations

from flask import Flask, g, request

from ..common.datetime_utils import parse_hhmm, parse_iso_date
from ..common.web import handles_errors, json_fail, json_ok, make_guards, optional_date, request_data
from ..container import Container
from ..core.enums import RequestKind, RequestStatus


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_guards(container.session_resolver)

    def _kind(value: str):
        try:
            return RequestKind(value)
        except ValueError:
            return None

    @app.route("/requests", methods=["GET"], endpoint="my_requests")
    @handles_errors("System error while loading requests")
    @login_required
    def my_requests():
        return json_ok(requests=container.request_service.list_my_requests(g.actor))

    @app.route("/requests/leave", methods=["POST"], endpoint="new_leave")
    @handles_errors("System error while submitting the leave request")
    @login_required
    def new_leave():
        data = request_data()
        record = container.request_service.submit_leave(
            g.actor,
            leave_type=data.get("leave_type", ""),
            start_date=optional_date(data.get("start_date")),
            end_date=optional_date(data.get("end_date")),
            reason=data.get("reason", ""),
            attachment_name=data.get("attachment_name"),
            attachment_type=data.get("attachment_type"),
        )
        return json_ok(201, request=record)

    @app.route("/requests/overtime", methods=["POST"], endpoint="new_overtime")
    @handles_errors("System error while submitting the overtime request")
    @login_required
    def new_overtime():
        data = request_data()
        hours = data.get("hours")
        record = container.request_service.submit_overtime(
            g.actor,
            work_date=optional_date(data.get("date")),
            hours=hours if hours not in ("", None) else None,
            reason=data.get("reason", ""),
        )
        return json_ok(201, request=record)

    @app.route("/requests/time-adjustment", methods=["POST"], endpoint="new_time_adjustment")
    @handles_errors("System error while submitting the time adjustment")
    @login_required
    def new_time_adjustment():
        data = request_data()
        record = container.request_service.submit_time_adjustment(
            g.actor,
            work_date=parse_iso_date(data.get("date", "")),
            requested_time_in=parse_hhmm(data.get("time_in")),
            requested_time_out=parse_hhmm(data.get("time_out")),
            reason=data.get("reason", ""),
        )
        return json_ok(201, request=record)

    @app.route("/admin/requests/<kind>", methods=["GET"], endpoint="admin_requests")
    @handles_errors("System error while loading requests")
    @admin_required
    def admin_requests(kind: str):
        request_kind = _kind(kind)
        if request_kind is None:
            return json_fail(f"Unknown request kind: {kind}", 404)
        status = request.args.get("status") or None
        if status and status not in {s.value for s in RequestStatus}:
            return json_fail(f"Unknown status: {status}", 400)
        records = container.request_service.list_requests(g.actor, request_kind, status=status)
        return json_ok(requests=records)

    @app.route("/admin/requests/<kind>/<request_id>/<action>", methods=["POST"], endpoint="decide_request")
    @handles_errors("System error while processing the request")
    @admin_required
    def decide_request(kind: str, request_id: str, action: str):
        request_kind = _kind(kind)
        decision = {"approve": RequestStatus.APPROVED, "reject": RequestStatus.REJECTED}.get(action)
        if request_kind is None or decision is None:
            return json_fail("Unknown request action", 404)
        note = request_data().get("admin_note", "")
        record = container.request_service.decide(g.actor, request_kind, request_id, decision, note)
        return json_ok(request=record)

    @app.route("/admin/requests/time-adjustment/reapply", methods=["POST"], endpoint="reapply_adjustments")
    @handles_errors("System error while reapplying time adjustments")
    @admin_required
    def reapply_adjustments():
        applied = container.request_service.reapply_pending_adjustments(g.actor)
        return json_ok(applied=applied)
