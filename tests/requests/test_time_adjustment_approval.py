from __future__ import annotations

from datetime import datetime, time, timedelta

import pytest

from src.hris_portal.hris_portal.attendance.model import time_log_id
from src.hris_portal.hris_portal.core.enums import RequestKind, RequestStatus, TimeLogStatus
from src.hris_portal.hris_portal.core.exceptions import AuthorizationError, ValidationError


@pytest.fixture
def worked_day(container, employee, clock, fixed_now):
    container.attendance_service.clock_in(employee)
    clock.set(fixed_now.replace(hour=17, minute=0))
    container.attendance_service.clock_out(employee)
    clock.set(fixed_now + timedelta(hours=10))
    return fixed_now.date()


def _adjust(container, actor, day, time_in=time(8, 0), time_out=None):
    return container.request_service.submit_time_adjustment(
        actor,
        work_date=day,
        requested_time_in=time_in,
        requested_time_out=time_out,
        reason="Badge reader was down",
    )


def test_submission_captures_original_times(container, employee, worked_day):
    record = _adjust(container, employee, worked_day)

    assert record.original.time_in == time(8, 15)
    assert record.original.time_out == time(17, 0)
    assert record.requested.time_in == time(8, 0)
    assert record.status == RequestStatus.PENDING
    assert record.applied_at is None


def test_requested_times_must_differ(container, employee, worked_day):
    with pytest.raises(ValidationError):
        _adjust(container, employee, worked_day, time(8, 15), time(17, 0))
    with pytest.raises(ValidationError):
        _adjust(container, employee, worked_day, None, None)


def test_adjustment_for_day_without_log(container, employee, worked_day):
    record = _adjust(container, employee, worked_day - timedelta(days=1), time(8, 0), time(17, 0))

    assert record.original.time_in is None and record.original.time_out is None


def test_approval_overwrites_time_log(container, repos, admin, employee, worked_day):
    record = _adjust(container, employee, worked_day)

    decided = container.request_service.approve(admin, RequestKind.TIME_ADJUSTMENT, record.request_id)

    log = repos["time_logs_repo"].get(time_log_id(employee.uid, worked_day))
    assert decided.status == RequestStatus.APPROVED
    assert log.time_in == datetime(2026, 3, 10, 8, 0)
    assert log.time_out == datetime(2026, 3, 10, 17, 0)
    assert repos["requests_repo"].get(RequestKind.TIME_ADJUSTMENT, record.request_id).applied_at is not None
    assert repos["requests_repo"].list_unapplied_adjustments() == []


def test_approval_creates_missing_time_log(container, repos, admin, employee, worked_day):
    day = worked_day - timedelta(days=2)
    record = _adjust(container, employee, day, time(7, 0), time(16, 0))

    container.request_service.approve(admin, RequestKind.TIME_ADJUSTMENT, record.request_id)

    log = repos["time_logs_repo"].get(time_log_id(employee.uid, day))
    assert log.hours_worked == "9h0m"
    assert log.user_name == "Juan Dela Cruz"


def test_rejection_leaves_time_log_alone(container, repos, admin, employee, worked_day):
    before = repos["time_logs_repo"].get(time_log_id(employee.uid, worked_day))
    record = _adjust(container, employee, worked_day)

    container.request_service.reject(admin, RequestKind.TIME_ADJUSTMENT, record.request_id, "No proof")

    assert repos["time_logs_repo"].get(time_log_id(employee.uid, worked_day)) == before


def test_rejecting_an_applied_adjustment_restores_original_times(container, repos, admin, employee, worked_day):
    log_id = time_log_id(employee.uid, worked_day)
    record = _adjust(container, employee, worked_day, time(7, 0))
    container.request_service.approve(admin, RequestKind.TIME_ADJUSTMENT, record.request_id)
    assert repos["time_logs_repo"].get(log_id).time_in == datetime(2026, 3, 10, 7, 0)

    decided = container.request_service.reject(admin, RequestKind.TIME_ADJUSTMENT, record.request_id, "mistake")

    log = repos["time_logs_repo"].get(log_id)
    assert decided.status == RequestStatus.REJECTED
    assert log.time_in == datetime(2026, 3, 10, 8, 15)
    assert log.time_out == datetime(2026, 3, 10, 17, 0)
    assert log.status == TimeLogStatus.COMPLETED
    assert repos["requests_repo"].get(RequestKind.TIME_ADJUSTMENT, record.request_id).applied_at is None
    assert repos["requests_repo"].list_unapplied_adjustments() == []
    entry = container.attendance_service.attendance_history(employee)[0]
    assert entry.source == "time_log"
    assert entry.time_in == datetime(2026, 3, 10, 8, 15)


def test_rejecting_an_applied_adjustment_removes_the_log_it_created(container, repos, admin, employee, worked_day):
    day = worked_day - timedelta(days=2)
    record = _adjust(container, employee, day, time(7, 0), time(16, 0))
    container.request_service.approve(admin, RequestKind.TIME_ADJUSTMENT, record.request_id)

    container.request_service.reject(admin, RequestKind.TIME_ADJUSTMENT, record.request_id)

    assert repos["time_logs_repo"].get(time_log_id(employee.uid, day)) is None


def test_adjusting_clock_out_completes_an_active_log(container, repos, admin, employee, fixed_now):
    container.attendance_service.clock_in(employee)
    record = _adjust(container, employee, fixed_now.date(), None, time(17, 0))

    container.request_service.approve(admin, RequestKind.TIME_ADJUSTMENT, record.request_id)

    log = repos["time_logs_repo"].get(time_log_id(employee.uid, fixed_now.date()))
    assert log.time_out == datetime(2026, 3, 10, 17, 0)
    assert log.status == TimeLogStatus.COMPLETED
    with pytest.raises(ValidationError):
        container.attendance_service.clock_out(employee)


def test_interrupted_approval_is_recovered_by_reapply(container, repos, admin, employee, worked_day):
    store = repos["time_logs_repo"]
    log_id = time_log_id(employee.uid, worked_day)
    before = store.get(log_id)
    record = _adjust(container, employee, worked_day)

    def unavailable(*args, **kwargs):
        raise ConnectionError("database went away")

    store.overwrite_times = unavailable
    with pytest.raises(ConnectionError):
        container.request_service.approve(admin, RequestKind.TIME_ADJUSTMENT, record.request_id)

    assert repos["requests_repo"].get(RequestKind.TIME_ADJUSTMENT, record.request_id).status == RequestStatus.APPROVED
    assert store.get(log_id) == before
    assert [a.request_id for a in repos["requests_repo"].list_unapplied_adjustments()] == [record.request_id]

    del store.overwrite_times
    assert container.request_service.reapply_pending_adjustments(admin) == 1
    assert store.get(log_id).time_in == datetime(2026, 3, 10, 8, 0)
    assert container.request_service.reapply_pending_adjustments(admin) == 0


def test_reapply_requires_admin_unless_system(container, employee):
    with pytest.raises(AuthorizationError):
        container.request_service.reapply_pending_adjustments(employee)
    assert container.request_service.reapply_pending_adjustments(system=True) == 0
