from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from src.hris_portal.hris_portal.container import assemble
from src.hris_portal.hris_portal.core.enums import RequestKind, RequestStatus, TimeLogStatus
from src.hris_portal.hris_portal.users.model import Credentials


class FakeClock:
    """Callable clock the tests can move forward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now


class InMemoryUsers:
    def __init__(self):
        self.profiles = {}
        self.hashes = {}

    def get_by_uid(self, uid):
        return self.profiles.get(uid)

    def get_by_email(self, email):
        return next((p for p in self.profiles.values() if p.email == email), None)

    def get_credentials(self, email):
        profile = self.get_by_email(email)
        if not profile:
            return None
        return Credentials(uid=profile.uid, email=profile.email, password_hash=self.hashes[profile.uid])

    def create(self, profile, *, password_hash):
        self.profiles[profile.uid] = profile
        self.hashes[profile.uid] = password_hash

    def update_fields(self, uid, fields):
        if uid not in self.profiles:
            return False
        self.profiles[uid] = replace(self.profiles[uid], **fields)
        return True

    def delete(self, uid):
        self.hashes.pop(uid, None)
        return self.profiles.pop(uid, None) is not None

    def list_all(self):
        return sorted(self.profiles.values(), key=lambda p: p.created_at, reverse=True)


class InMemoryTimeLogs:
    def __init__(self):
        self.logs = {}

    def get(self, log_id):
        return self.logs.get(log_id)

    def put(self, log):
        self.logs[log.log_id] = log

    def mark_clock_out(self, log_id, *, time_out, updated_at):
        log = self.logs.get(log_id)
        if not log:
            return False
        self.logs[log_id] = replace(log, time_out=time_out, status=TimeLogStatus.COMPLETED, updated_at=updated_at)
        return True

    def overwrite_times(self, log_id, *, time_in, time_out, status, updated_at):
        log = self.logs.get(log_id)
        if not log:
            return False
        self.logs[log_id] = replace(log, time_in=time_in, time_out=time_out, status=status, updated_at=updated_at)
        return True

    def delete(self, log_id):
        return self.logs.pop(log_id, None) is not None

    def list_for_user(self, user_id, *, start: Optional[date] = None, end: Optional[date] = None, limit=None):
        items = [
            log
            for log in self.logs.values()
            if log.user_id == user_id and (start is None or log.date >= start) and (end is None or log.date <= end)
        ]
        items.sort(key=lambda log: log.date, reverse=True)
        return items[:limit] if limit is not None else items


class InMemoryRequests:
    def __init__(self):
        self.records = {}

    def insert(self, record):
        self.records[(record.kind, record.request_id)] = record

    def get(self, kind, request_id):
        return self.records.get((RequestKind(kind), request_id))

    def decide(self, kind, request_id, *, status, admin_note, processed_at, processed_by):
        key = (RequestKind(kind), request_id)
        if key not in self.records:
            return False
        self.records[key] = replace(
            self.records[key],
            status=status,
            admin_note=admin_note,
            processed_at=processed_at,
            processed_by=processed_by,
        )
        return True

    def list_requests(self, kind, *, status=None, user_id=None):
        items = [
            r
            for (k, _), r in self.records.items()
            if k == kind and (status is None or r.status == status) and (user_id is None or r.user_id == user_id)
        ]
        items.sort(key=lambda r: r.created_at, reverse=True)
        return items

    def mark_adjustment_applied(self, request_id, *, applied_at):
        key = (RequestKind.TIME_ADJUSTMENT, request_id)
        if key not in self.records:
            return False
        self.records[key] = replace(self.records[key], applied_at=applied_at)
        return True

    def list_unapplied_adjustments(self):
        return [
            r
            for (k, _), r in self.records.items()
            if k == RequestKind.TIME_ADJUSTMENT and r.status == RequestStatus.APPROVED and r.applied_at is None
        ]


class InMemorySchedules:
    def __init__(self):
        self.schedules = {}

    def list_for_month(self, *, user_id, year, month):
        items = [s for s in self.schedules.values() if s.user_id == user_id and s.year == year and s.month == month]
        return sorted(items, key=lambda s: s.date)

    def insert(self, schedule):
        self.schedules[schedule.schedule_id] = schedule

    def update(self, schedule):
        if schedule.schedule_id not in self.schedules:
            return False
        self.schedules[schedule.schedule_id] = schedule
        return True


class InMemoryActivities:
    def __init__(self):
        self.items = []

    def insert(self, activity):
        self.items.append(activity)

    def list_for_user(self, user_id, *, limit=None):
        # reversed() keeps insertion order stable among equal timestamps
        items = sorted(
            (a for a in reversed(self.items) if a.user_id == user_id), key=lambda a: a.timestamp, reverse=True
        )
        return items[:limit] if limit is not None else items


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 10, 8, 15, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def repos():
    return {
        "users_repo": InMemoryUsers(),
        "time_logs_repo": InMemoryTimeLogs(),
        "requests_repo": InMemoryRequests(),
        "schedules_repo": InMemorySchedules(),
        "activities_repo": InMemoryActivities(),
    }


@pytest.fixture
def container(repos, clock):
    return assemble(**repos, clock=clock)


@pytest.fixture
def admin(container):
    identity = container.identity_gateway.sign_up(
        "admin@example.com",
        "admin123",
        {"name": "Ada Admin", "employee_id": "ADM-1", "role": "admin"},
        notify=False,
    )
    return container.session_resolver.resolve(identity.uid)


@pytest.fixture
def employee(container):
    identity = container.identity_gateway.sign_up(
        "juan@example.com",
        "secret123",
        {"name": "Juan Dela Cruz", "employee_id": "EMP-1", "department": "Ops"},
        notify=False,
    )
    return container.session_resolver.resolve(identity.uid)
