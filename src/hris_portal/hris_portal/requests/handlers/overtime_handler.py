from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import date_key
from ...common.validators import require_non_empty, require_positive_number
from ...core.enums import ActivityType, RequestKind, RequestStatus
from ...core.exceptions import ValidationError
from ...users.model import Actor
from ..model import NewOvertime, OvertimeRequest
from .base import RequestHandler


class OvertimeHandler(RequestHandler):
    kind = RequestKind.OVERTIME
    activity_type = ActivityType.OVERTIME_REQUEST

    def build(self, *, request_id: str, actor: Actor, payload: NewOvertime, now: datetime) -> OvertimeRequest:
        if payload.hours is None:
            raise ValidationError("Overtime hours are required")
        hours = require_positive_number(payload.hours, "Overtime hours")
        reason = require_non_empty(payload.reason, "Reason")

        return OvertimeRequest(
            request_id=request_id,
            user_id=actor.uid,
            user_name=actor.display_name,
            employee_id=actor.display_employee_id,
            work_date=payload.work_date or now.date(),
            hours=hours,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=now,
        )

    def describe_submission(self, record: OvertimeRequest) -> str:
        return f"Requested {record.hours:g} hour(s) overtime on {date_key(record.work_date)}"
