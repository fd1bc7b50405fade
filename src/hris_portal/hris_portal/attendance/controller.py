from __future__ import annotations

from flask import Flask, g, request

from ..common.web import handles_errors, json_ok, make_guards
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required, _ = make_guards(container.session_resolver)

    @app.route("/dashboard", methods=["GET"], endpoint="dashboard")
    @handles_errors("System error while loading the dashboard")
    @login_required
    def dashboard():
        today = container.attendance_service.today(g.actor)
        feed = container.activity_service.combined_feed(g.actor.uid)
        return json_ok(
            actor=g.actor,
            today=today.date,
            time_log=today.time_log,
            schedule=today.schedule,
            hours_worked=today.hours_worked,
            activities=feed,
        )

    @app.route("/attendance/clock-in", methods=["POST"], endpoint="clock_in")
    @handles_errors("System error while clocking in")
    @login_required
    def clock_in():
        log = container.attendance_service.clock_in(g.actor)
        return json_ok(201, time_log=log)

    @app.route("/attendance/clock-out", methods=["POST"], endpoint="clock_out")
    @handles_errors("System error while clocking out")
    @login_required
    def clock_out():
        log = container.attendance_service.clock_out(g.actor)
        return json_ok(time_log=log, hours_worked=log.hours_worked)

    @app.route("/attendance/history", methods=["GET"], endpoint="attendance_history")
    @handles_errors("System error while loading attendance history")
    @login_required
    def attendance_history():
        days = request.args.get("days", type=int)
        entries = container.attendance_service.attendance_history(g.actor, days)
        return json_ok(history=entries)
