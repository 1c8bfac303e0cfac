from __future__ import annotations

import pytest

from hr_portal.main import create_app


@pytest.fixture
def app(container):
    return create_app(settings_module="hr_portal.config.testing", container=container)


@pytest.fixture
def client(app):
    return app.test_client()


def login_as(client, employee_id: int) -> None:
    with client.session_transaction() as sess:
        sess["user_id"] = employee_id


def test_login_sets_session(client):
    resp = client.post("/login", json={"email": "alice@corp.test", "password": "alice-secret"})

    assert resp.status_code == 200
    assert resp.get_json()["user"] == {"id": 10, "name": "Alice Nguyen", "role": "EMPLOYEE"}
    with client.session_transaction() as sess:
        assert sess["user_id"] == 10


def test_login_with_bad_password(client):
    resp = client.post("/login", data={"email": "alice@corp.test", "password": "nope"})

    assert resp.status_code == 401
    assert resp.get_json()["kind"] == "Unauthorized"


def test_logout_clears_session(client):
    login_as(client, 10)
    client.post("/logout")

    assert client.get("/employee/time-off").status_code == 401


def test_requests_without_session_are_unauthorized(client):
    resp = client.get("/employee/time-off")

    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Unauthorized", "kind": "Unauthorized"}


def test_full_request_flow(client):
    login_as(client, 10)
    created = client.post(
        "/time-off",
        json={"time_off_type": "PAID_TIME_OFF", "start_date": "2026-04-06", "end_date": "2026-04-10"},
    )
    assert created.status_code == 201
    body = created.get_json()
    assert body["time_off"]["days"] == 5
    assert body["time_off"]["status"] == "PENDING"
    request_id = body["time_off"]["id"]

    login_as(client, 1)
    approved = client.post(f"/hr/time-off/{request_id}/approve")
    assert approved.status_code == 200
    assert approved.get_json()["time_off"]["status"] == "APPROVED"
    assert "warning" not in approved.get_json()

    again = client.post(f"/hr/time-off/{request_id}/reject", json={"reason": "late"})
    assert again.status_code == 409
    assert again.get_json()["kind"] == "InvalidState"

    login_as(client, 10)
    balance = client.get("/time-off/balance?leave_type=PAID_TIME_OFF")
    assert balance.get_json() == {"total": 24, "used": 5, "available": 19}

    mine = client.get("/employee/time-off").get_json()
    assert mine["allocations"]["PAID_TIME_OFF"]["available"] == 19
    assert [r["status"] for r in mine["time_off_requests"]] == ["APPROVED"]


def test_reject_stores_reason(client):
    login_as(client, 10)
    request_id = client.post(
        "/time-off",
        data={"time_off_type": "SICK_LEAVE", "start_date": "2026-04-06", "end_date": "2026-04-06"},
    ).get_json()["time_off"]["id"]

    login_as(client, 1)
    resp = client.post(f"/hr/time-off/{request_id}/reject", data={"reason": "No certificate"})

    assert resp.status_code == 200
    assert resp.get_json()["time_off"]["rejection_reason"] == "No certificate"


def test_employee_targeting_colleague_is_forbidden(client):
    login_as(client, 10)
    resp = client.post(
        "/time-off",
        json={"user_id": 11, "time_off_type": "SICK_LEAVE", "start_date": "2026-04-06", "end_date": "2026-04-06"},
    )

    assert resp.status_code == 403
    assert resp.get_json()["kind"] == "Forbidden"


def test_other_hr_cannot_approve(client):
    login_as(client, 10)
    request_id = client.post(
        "/time-off",
        json={"time_off_type": "SICK_LEAVE", "start_date": "2026-04-06", "end_date": "2026-04-06"},
    ).get_json()["time_off"]["id"]

    login_as(client, 2)
    assert client.post(f"/hr/time-off/{request_id}/approve").status_code == 403


def test_validation_and_not_found_codes(client):
    login_as(client, 10)
    missing_type = client.post("/time-off", json={"start_date": "2026-04-06", "end_date": "2026-04-06"})
    assert missing_type.status_code == 400
    assert missing_type.get_json()["kind"] == "ValidationError"

    login_as(client, 1)
    assert client.post("/hr/time-off/999/approve").status_code == 404
    bad_target = client.post(
        "/time-off",
        json={"user_id": "abc", "time_off_type": "SICK_LEAVE", "start_date": "2026-04-06", "end_date": "2026-04-06"},
    )
    assert bad_target.status_code == 400


def test_hr_views(client):
    login_as(client, 1)

    employees = client.get("/hr/employees?q=alice").get_json()["employees"]
    assert [e["id"] for e in employees] == [10]

    attendance = client.get("/hr/attendance?date=2026-02-02").get_json()
    assert [r["status"] for r in attendance["attendance"]] == ["PRESENT", "ABSENT"]

    assert client.get("/hr/time-off").get_json()["time_off_requests"] == []


def test_employee_cannot_use_hr_views(client):
    login_as(client, 10)

    assert client.get("/hr/employees").status_code == 403
    assert client.get("/hr/attendance").status_code == 403
    assert client.get("/hr/time-off").status_code == 403


def test_my_attendance_endpoint(client):
    login_as(client, 10)
    data = client.get("/employee/attendance?month=2&year=2026").get_json()

    assert data["summary"]["total_working_days"] == 3


def test_unexpected_errors_are_logged_and_hidden(client, timeoff_repo, caplog):
    def broken(**kwargs):
        raise RuntimeError("connection reset by peer")

    timeoff_repo.list_requests = broken
    login_as(client, 10)

    with caplog.at_level("ERROR"):
        resp = client.get("/employee/time-off")

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Failed to fetch time off requests"}
    assert "connection reset" not in resp.get_data(as_text=True)
    assert "Failed to fetch time off requests" in caplog.text


def test_hr_create_without_employee_is_bad_request(client):
    login_as(client, 1)
    resp = client.post(
        "/time-off",
        json={"time_off_type": "SICK_LEAVE", "start_date": "2026-04-06", "end_date": "2026-04-06"},
    )

    assert resp.status_code == 400
    assert resp.get_json()["kind"] == "ValidationError"


def test_non_string_notes_are_bad_request(client):
    login_as(client, 10)
    resp = client.post(
        "/time-off",
        json={"time_off_type": "SICK_LEAVE", "start_date": "2026-04-06", "end_date": "2026-04-06", "notes": 5},
    )

    assert resp.status_code == 400
    assert resp.get_json()["kind"] == "ValidationError"
