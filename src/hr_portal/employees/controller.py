from __future__ import annotations

from datetime import timedelta

from flask import Flask, request, session

from ..common.http import json_action, request_data
from ..core.constants import DEFAULT_SESSION_DAYS
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["POST"], endpoint="login")
    @json_action("Failed to sign in")
    def login():
        data = request_data()
        actor = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
        session["user_id"] = actor.employee_id
        session["name"] = actor.full_name
        session["role"] = actor.role.value

        return {"success": "Signed in", "user": {"id": actor.employee_id, "name": actor.full_name, "role": actor.role.value}}

    @app.route("/logout", methods=["POST"], endpoint="logout")
    @json_action("Failed to sign out")
    def logout():
        session.clear()
        return {"success": "Signed out"}

    @app.route("/hr/employees", methods=["GET"], endpoint="hr_employees")
    @json_action("Failed to fetch employees")
    def hr_employees():
        actor = container.employee_service.resolve_actor(session.get("user_id"))
        return {"employees": container.employee_service.list_team(actor, search=request.args.get("q"))}
