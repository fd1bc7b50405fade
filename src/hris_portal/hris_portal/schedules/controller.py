from __future__ import annotations

from flask import Flask, g, request

from ..common.datetime_utils import parse_hhmm, parse_iso_date
from ..common.web import handles_errors, json_ok, make_guards, request_data
from ..container import Container
from .model import SHIFT_PRESETS


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_guards(container.session_resolver)

    @app.route("/schedules/<int:year>/<int:month>", methods=["GET"], endpoint="month_schedule")
    @handles_errors("System error while loading the schedule")
    @login_required
    def month_schedule(year: int, month: int):
        user_id = request.args.get("user_id") or g.actor.uid
        grid = container.schedule_planner.month_grid(year, month)
        schedules = container.schedule_planner.view_month(g.actor, user_id, year, month)
        return json_ok(
            user_id=user_id,
            year=grid.year,
            month=grid.month,
            leading_blanks=grid.leading_blanks,
            weeks=grid.weeks,
            schedules=schedules,
            presets=list(SHIFT_PRESETS.values()),
        )

    @app.route("/admin/schedules/<uid>/<day>", methods=["PUT"], endpoint="upsert_schedule")
    @handles_errors("System error while saving the schedule")
    @admin_required
    def upsert_schedule(uid: str, day: str):
        data = request_data()
        schedule = container.schedule_planner.upsert_schedule(
            g.actor,
            uid,
            parse_iso_date(day),
            shift_type=data.get("shift_type", ""),
            time_in=parse_hhmm(data.get("time_in")),
            time_out=parse_hhmm(data.get("time_out")),
        )
        return json_ok(schedule=schedule)
