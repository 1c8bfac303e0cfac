from __future__ import annotations

from flask import Flask, request, session

from ..common.http import json_action, request_data
from ..core.exceptions import ValidationError
from ..container import Container
from .service import request_row


def _optional_int(value, field_name: str):
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")


def register(app: Flask, container: Container) -> None:
    def current_actor():
        return container.employee_service.resolve_actor(session.get("user_id"))

    @app.route("/employee/time-off", methods=["GET"], endpoint="my_time_off")
    @json_action("Failed to fetch time off requests")
    def my_time_off():
        return container.timeoff_service.list_my_requests(actor=current_actor())

    @app.route("/time-off", methods=["POST"], endpoint="create_time_off")
    @json_action("Failed to create time off request")
    def create_time_off():
        data = request_data()
        created = container.timeoff_service.create(
            actor=current_actor(),
            leave_type=data.get("time_off_type"),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            target_employee_id=_optional_int(data.get("user_id"), "Employee"),
            notes=data.get("notes"),
            attachment=data.get("attachment"),
        )
        return {"success": "Time off request created successfully", "time_off": request_row(created)}, 201

    @app.route("/time-off/balance", methods=["GET"], endpoint="time_off_balance")
    @json_action("Failed to fetch time off balance")
    def time_off_balance():
        balance = container.timeoff_service.available_balance(
            actor=current_actor(),
            leave_type=request.args.get("leave_type"),
            employee_id=_optional_int(request.args.get("employee_id"), "Employee"),
        )
        return balance.as_dict()

    @app.route("/hr/time-off", methods=["GET"], endpoint="hr_time_off")
    @json_action("Failed to fetch time off requests")
    def hr_time_off():
        return container.timeoff_service.list_team_requests(actor=current_actor(), search=request.args.get("q"))

    @app.route("/hr/time-off/<int:request_id>/approve", methods=["POST"], endpoint="approve_time_off")
    @json_action("Failed to approve time off request")
    def approve_time_off(request_id: int):
        decision = container.timeoff_service.approve(actor=current_actor(), request_id=request_id)
        body = {"success": "Time off request approved", "time_off": request_row(decision.request)}
        if decision.over_allocated:
            body["warning"] = "Approved days exceed the employee's allocation"
        return body

    @app.route("/hr/time-off/<int:request_id>/reject", methods=["POST"], endpoint="reject_time_off")
    @json_action("Failed to reject time off request")
    def reject_time_off(request_id: int):
        decision = container.timeoff_service.reject(
            actor=current_actor(),
            request_id=request_id,
            reason=request_data().get("reason"),
        )
        return {"success": "Time off request rejected", "time_off": request_row(decision.request)}
