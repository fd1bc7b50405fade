from __future__ import annotations

from datetime import datetime

from ...attendance.model import time_log_id
from ...attendance.repository import TimeLogRepository
from ...attendance.service import AttendanceService
from ...common.datetime_utils import date_key
from ...common.validators import require_non_empty
from ...core.enums import ActivityType, RequestKind, RequestStatus
from ...core.exceptions import ValidationError
from ...users.model import Actor
from ..model import NewTimeAdjustment, TimeAdjustment, TimePair
from ..repository import RequestRepository
from .base import RequestHandler


class TimeAdjustmentHandler(RequestHandler):
    kind = RequestKind.TIME_ADJUSTMENT
    activity_type = ActivityType.TIME_ADJUSTMENT

    def __init__(self, time_logs: TimeLogRepository, attendance: AttendanceService, requests: RequestRepository):
        self._time_logs = time_logs
        self._attendance = attendance
        self._requests = requests

    def build(self, *, request_id: str, actor: Actor, payload: NewTimeAdjustment, now: datetime) -> TimeAdjustment:
        if payload.work_date is None:
            raise ValidationError("Please select the date to adjust")
        reason = require_non_empty(payload.reason, "Reason")

        log = self._time_logs.get(time_log_id(actor.uid, payload.work_date))
        original = TimePair(
            time_in=log.time_in.time().replace(second=0, microsecond=0) if log and log.time_in else None,
            time_out=log.time_out.time().replace(second=0, microsecond=0) if log and log.time_out else None,
        )
        requested = TimePair(time_in=payload.requested_time_in, time_out=payload.requested_time_out)

        changed = (requested.time_in is not None and requested.time_in != original.time_in) or (
            requested.time_out is not None and requested.time_out != original.time_out
        )
        if not changed:
            raise ValidationError("Requested times must differ from the recorded times")

        return TimeAdjustment(
            request_id=request_id,
            user_id=actor.uid,
            user_name=actor.display_name,
            employee_id=actor.display_employee_id,
            work_date=payload.work_date,
            original=original,
            requested=requested,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=now,
        )

    def describe_submission(self, record: TimeAdjustment) -> str:
        return f"Requested time adjustment for {date_key(record.work_date)}"

    def on_approved(self, record: TimeAdjustment, *, now: datetime) -> None:
        # Second, independent write: if it fails, applied_at stays empty and
        # the adjustment is picked up again by the reapply sweep.
        self._attendance.apply_adjustment(record, now=now)
        self._requests.mark_adjustment_applied(record.request_id, applied_at=now)

    def on_revoked(self, record: TimeAdjustment, *, now: datetime) -> None:
        if record.applied_at is None:
            return
        self._attendance.revert_adjustment(record, now=now)
        self._requests.mark_adjustment_applied(record.request_id, applied_at=None)
