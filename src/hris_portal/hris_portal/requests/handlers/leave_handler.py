from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import inclusive_days
from ...core.enums import LEAVE_TYPES, ActivityType, RequestKind, RequestStatus
from ...core.exceptions import ValidationError
from ...users.model import Actor
from ..model import LeaveRequest, NewLeave
from .base import RequestHandler


class LeaveHandler(RequestHandler):
    kind = RequestKind.LEAVE
    activity_type = ActivityType.LEAVE_REQUEST

    def build(self, *, request_id: str, actor: Actor, payload: NewLeave, now: datetime) -> LeaveRequest:
        if payload.start_date is None or payload.end_date is None:
            raise ValidationError("Please select both from and to dates")
        if payload.end_date < payload.start_date:
            raise ValidationError("End date cannot be before start date")
        if payload.leave_type not in LEAVE_TYPES:
            raise ValidationError(f"Unknown leave type: {payload.leave_type!r}")

        return LeaveRequest(
            request_id=request_id,
            user_id=actor.uid,
            user_name=actor.display_name,
            employee_id=actor.display_employee_id,
            leave_type=payload.leave_type,
            start_date=payload.start_date,
            end_date=payload.end_date,
            days=inclusive_days(payload.start_date, payload.end_date),
            reason=(payload.reason or "").strip(),
            status=RequestStatus.PENDING,
            created_at=now,
            has_attachment=bool(payload.attachment_name),
            attachment_name=payload.attachment_name or None,
            attachment_type=payload.attachment_type or None,
        )

    def describe_submission(self, record: LeaveRequest) -> str:
        return f"Submitted {record.leave_type} for {record.days} day(s)"
