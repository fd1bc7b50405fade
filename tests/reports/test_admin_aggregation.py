from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.hris_portal.hris_portal.attendance.model import TimeLog
from src.hris_portal.hris_portal.core.enums import RequestKind, TimeLogStatus
from src.hris_portal.hris_portal.core.exceptions import AuthorizationError, ValidationError
from src.hris_portal.hris_portal.reports.service import render_csv, report_filename


def _log(user, day, hour_in, hour_out=None):
    return TimeLog(
        user_id=user.uid,
        date=day,
        time_in=datetime.combine(day, datetime.min.time()).replace(hour=hour_in),
        time_out=datetime.combine(day, datetime.min.time()).replace(hour=hour_out) if hour_out else None,
        status=TimeLogStatus.COMPLETED if hour_out else TimeLogStatus.ACTIVE,
        user_name=user.name,
    )


@pytest.fixture
def second_employee(container):
    identity = container.identity_gateway.sign_up(
        "ana@example.com", "secret123", {"name": "Ana Reyes", "employee_id": "EMP-2"}, notify=False
    )
    return container.session_resolver.resolve(identity.uid)


def test_dashboard_counts_match_collections(container, admin, employee):
    service = container.request_service
    leave_a = service.submit_leave(
        employee, leave_type="Sick Leave (SL)", start_date=date(2026, 3, 2), end_date=date(2026, 3, 2)
    )
    service.submit_leave(
        employee, leave_type="Vacation Leave (VL)", start_date=date(2026, 3, 5), end_date=date(2026, 3, 6)
    )
    ot_a = service.submit_overtime(employee, work_date=None, hours=2.5, reason="Release")
    ot_b = service.submit_overtime(employee, work_date=None, hours=1, reason="Hotfix")
    ot_c = service.submit_overtime(employee, work_date=None, hours=4, reason="Inventory")
    service.approve(admin, RequestKind.LEAVE, leave_a.request_id)
    service.approve(admin, RequestKind.OVERTIME, ot_a.request_id)
    service.approve(admin, RequestKind.OVERTIME, ot_b.request_id)
    service.reject(admin, RequestKind.OVERTIME, ot_c.request_id)

    counts = container.aggregation_service.dashboard_counts(admin)

    assert counts.leave_requests == 2
    assert counts.overtime_requests == 3
    assert counts.time_adjustments == 0
    assert counts.total_requests == counts.leave_requests + counts.overtime_requests + counts.time_adjustments
    assert counts.pending == 1
    assert counts.approved == 3
    assert counts.approved_overtime_hours == pytest.approx(3.5)


def test_dashboard_is_admin_only(container, employee):
    with pytest.raises(AuthorizationError):
        container.aggregation_service.dashboard_counts(employee)


def test_report_rows_sorted_by_date_then_name(container, repos, admin, employee, second_employee):
    store = repos["time_logs_repo"]
    store.put(_log(employee, date(2026, 3, 3), 8, 17))
    store.put(_log(second_employee, date(2026, 3, 3), 7, 16))
    store.put(_log(second_employee, date(2026, 3, 2), 9, 18))
    store.put(_log(employee, date(2026, 3, 9), 8))
    store.put(_log(employee, date(2026, 2, 27), 8, 17))

    report = container.aggregation_service.generate_attendance_report(
        admin, start=date(2026, 3, 1), end=date(2026, 3, 5)
    )

    assert [(r.date, r.employee_name) for r in report.rows] == [
        ("2026-03-02", "Ana Reyes"),
        ("2026-03-03", "Ana Reyes"),
        ("2026-03-03", "Juan Dela Cruz"),
    ]


def test_report_csv_layout(container, repos, admin, employee):
    repos["time_logs_repo"].put(_log(employee, date(2026, 3, 3), 8, 17))
    repos["time_logs_repo"].put(_log(employee, date(2026, 3, 4), 13))
    report = container.aggregation_service.generate_attendance_report(
        admin, start=date(2026, 3, 1), end=date(2026, 3, 31)
    )

    lines = render_csv(report).splitlines()

    assert lines[0] == "Log Date,Employee Name,Time In,Time Out"
    assert lines[1] == "2026-03-03,Juan Dela Cruz,08:00 AM,05:00 PM"
    assert lines[2] == "2026-03-04,Juan Dela Cruz,01:00 PM,"


def test_report_filename():
    assert report_filename(date(2026, 3, 1), date(2026, 3, 31)) == "time_logs_report_2026-03-01_to_2026-03-31.csv"


def test_report_rejects_inverted_range(container, admin):
    with pytest.raises(ValidationError):
        container.aggregation_service.generate_attendance_report(
            admin, start=date(2026, 3, 5), end=date(2026, 3, 5) - timedelta(days=1)
        )
