from __future__ import annotations

import pytest

from src.hris_portal.hris_portal.main import create_app


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


def _sign_in(client, email, password):
    res = client.post("/auth/sign-in", json={"email": email, "password": password})
    assert res.status_code == 200, res.get_json()
    return res.get_json()["actor"]


def test_sign_up_then_me(client):
    res = client.post(
        "/auth/sign-up",
        json={"email": "new@example.com", "password": "secret123", "name": "New Hire", "employee_id": "EMP-7"},
    )

    assert res.status_code == 201
    assert res.get_json()["actor"]["role"] == "employee"
    me = client.get("/me").get_json()
    assert me["success"] is True
    assert me["actor"]["employee_id"] == "EMP-7"


def test_protected_routes_need_session(client):
    for path in ("/me", "/dashboard", "/attendance/history", "/requests"):
        res = client.get(path)
        assert res.status_code == 401
        assert res.get_json() == {"success": False, "message": "Please sign in to continue"}


def test_sign_in_failure_is_401(client, employee):
    res = client.post("/auth/sign-in", json={"email": "juan@example.com", "password": "nope-nope"})

    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_sign_out_clears_session(client, employee):
    _sign_in(client, "juan@example.com", "secret123")

    assert client.post("/auth/sign-out").status_code == 200
    assert client.get("/me").status_code == 401


def test_attendance_flow(client, employee, clock, fixed_now):
    _sign_in(client, "juan@example.com", "secret123")

    assert client.post("/attendance/clock-in").status_code == 201
    again = client.post("/attendance/clock-in")
    assert again.status_code == 400
    assert again.get_json()["message"] == "You have already clocked in today"

    clock.set(fixed_now.replace(hour=17, minute=15))
    out = client.post("/attendance/clock-out").get_json()
    assert out["hours_worked"] == "9h0m"
    assert out["time_log"]["status"] == "completed"

    dashboard = client.get("/dashboard").get_json()
    assert dashboard["today"] == "2026-03-10"
    assert dashboard["hours_worked"] == "9h0m"
    assert dashboard["activities"][0]["type"] == "time_out"

    history = client.get("/attendance/history?days=3").get_json()["history"]
    assert [e["date"] for e in history] == ["2026-03-10", "2026-03-09", "2026-03-08"]
    assert history[1]["status"] == "absent"


def test_request_lifecycle_over_http(client, admin, employee):
    _sign_in(client, "juan@example.com", "secret123")
    bad = client.post(
        "/requests/leave",
        json={"leave_type": "Sick Leave (SL)", "start_date": "2026-03-05", "end_date": "2026-03-03"},
    )
    assert bad.status_code == 400
    created = client.post(
        "/requests/leave",
        json={"leave_type": "Sick Leave (SL)", "start_date": "2026-03-03", "end_date": "2026-03-05", "reason": "Flu"},
    )
    assert created.status_code == 201
    request_id = created.get_json()["request"]["request_id"]
    assert created.get_json()["request"]["days"] == 3
    assert client.get("/admin/requests/leave").status_code == 403

    _sign_in(client, "admin@example.com", "admin123")
    pending = client.get("/admin/requests/leave?status=pending").get_json()["requests"]
    assert [r["request_id"] for r in pending] == [request_id]

    decided = client.post(f"/admin/requests/leave/{request_id}/approve", json={"admin_note": "Get well"})
    assert decided.get_json()["request"]["status"] == "approved"
    assert client.post(f"/admin/requests/leave/{request_id}/archive").status_code == 404
    assert client.get("/admin/requests/holiday").status_code == 404

    _sign_in(client, "juan@example.com", "secret123")
    mine = client.get("/requests").get_json()["requests"]
    assert mine["leave"][0]["admin_note"] == "Get well"


def test_overtime_and_time_adjustment_over_http(client, admin, employee):
    _sign_in(client, "juan@example.com", "secret123")
    client.post("/attendance/clock-in")

    overtime = client.post("/requests/overtime", json={"hours": "2", "reason": "Month end"})
    assert overtime.status_code == 201
    assert overtime.get_json()["request"]["work_date"] == "2026-03-10"

    adjustment = client.post(
        "/requests/time-adjustment",
        json={"date": "2026-03-10", "time_in": "08:00", "reason": "Late badge"},
    )
    assert adjustment.status_code == 201
    payload = adjustment.get_json()["request"]
    assert payload["original"] == {"time_in": "08:15", "time_out": None}
    assert payload["requested"] == {"time_in": "08:00", "time_out": None}

    _sign_in(client, "admin@example.com", "admin123")
    res = client.post(f"/admin/requests/time-adjustment/{payload['request_id']}/approve")
    assert res.get_json()["request"]["status"] == "approved"
    assert client.post("/admin/requests/time-adjustment/reapply").get_json()["applied"] == 0


def test_schedules_over_http(client, admin, employee):
    _sign_in(client, "admin@example.com", "admin123")
    saved = client.put(f"/admin/schedules/{employee.uid}/2026-03-12", json={"shift_type": "7-4"})
    assert saved.get_json()["schedule"]["time_in"] == "07:00"

    _sign_in(client, "juan@example.com", "secret123")
    month = client.get("/schedules/2026/3").get_json()
    assert month["leading_blanks"] == 0
    assert month["schedules"]["2026-03-12"]["shift_type"] == "7-4"
    assert client.get(f"/schedules/2026/3?user_id={admin.uid}").status_code == 403


def test_admin_dashboard_and_csv_report(client, admin, employee, clock, fixed_now):
    _sign_in(client, "juan@example.com", "secret123")
    client.post("/attendance/clock-in")
    assert client.get("/admin/dashboard").status_code == 403

    _sign_in(client, "admin@example.com", "admin123")
    counts = client.get("/admin/dashboard").get_json()["counts"]
    assert counts["total_requests"] == 0

    assert client.get("/admin/report.csv?start=2026-03-01").status_code == 400
    res = client.get("/admin/report.csv?start=2026-03-01&end=2026-03-31")
    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    assert "time_logs_report_2026-03-01_to_2026-03-31.csv" in res.headers["Content-Disposition"]
    lines = res.data.decode("utf-8-sig").splitlines()
    assert lines == ["Log Date,Employee Name,Time In,Time Out", "2026-03-10,Juan Dela Cruz,08:15 AM,"]


def test_admin_employee_directory(client, admin, employee):
    _sign_in(client, "admin@example.com", "admin123")

    added = client.post(
        "/admin/employees",
        json={"email": "mark@example.com", "password": "secret123", "name": "Mark", "employee_id": "EMP-9"},
    )
    assert added.status_code == 201
    uid = added.get_json()["employee"]["uid"]

    found = client.get("/admin/employees?q=mark").get_json()["employees"]
    assert [e["uid"] for e in found] == [uid]

    patched = client.patch(f"/admin/employees/{uid}", json={"position": "Analyst"})
    assert patched.get_json()["employee"]["position"] == "Analyst"

    assert client.delete(f"/admin/employees/{uid}").status_code == 200
    assert client.delete(f"/admin/employees/{uid}").status_code == 404


@pytest.mark.parametrize("body", [{"uid": "someone-else"}, {"admin": "x"}, {"email": "other@example.com"}])
def test_patch_employee_rejects_non_editable_fields(client, admin, employee, body):
    _sign_in(client, "admin@example.com", "admin123")

    res = client.patch(f"/admin/employees/{employee.uid}", json=body)

    assert res.status_code == 400
    assert res.get_json()["message"].startswith("Fields cannot be edited")


@pytest.mark.parametrize("path", ["/me", "/dashboard", "/requests", "/admin/dashboard"])
def test_store_failure_during_session_lookup_is_json_500(client, repos, monkeypatch, admin, path):
    _sign_in(client, "admin@example.com", "admin123")

    def unavailable(uid):
        raise ConnectionError("database went away")

    monkeypatch.setattr(repos["users_repo"], "get_by_uid", unavailable)
    res = client.get(path)

    assert res.status_code == 500
    assert res.is_json
    assert res.get_json()["success"] is False
