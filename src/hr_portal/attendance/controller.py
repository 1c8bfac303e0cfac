from __future__ import annotations

from flask import Flask, request, session

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import json_action
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/employee/attendance", methods=["GET"], endpoint="my_attendance")
    @json_action("Failed to fetch attendance")
    def my_attendance():
        actor = container.employee_service.resolve_actor(session.get("user_id"))
        today = now_local().date()
        return container.attendance_service.my_attendance(
            actor=actor,
            month=request.args.get("month", today.month),
            year=request.args.get("year", today.year),
        )

    @app.route("/hr/attendance", methods=["GET"], endpoint="hr_attendance")
    @json_action("Failed to fetch attendance")
    def hr_attendance():
        actor = container.employee_service.resolve_actor(session.get("user_id"))
        raw_date = request.args.get("date")
        work_date = parse_iso_date(raw_date) if raw_date else now_local().date()
        return container.attendance_service.team_attendance(
            actor=actor,
            work_date=work_date,
            search=request.args.get("q"),
        )
