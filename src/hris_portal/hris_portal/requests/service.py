from __future__ import annotations

import logging
from datetime import date, time
from typing import Optional, Sequence

from ..activities.service import ActivityService
from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local
from ..core.enums import RequestKind, RequestStatus
from ..users.model import Actor
from ..users.service import require_actor, require_admin
from .handlers.base import RequestHandler
from .model import AnyRequest, LeaveRequest, NewLeave, NewOvertime, NewTimeAdjustment, OvertimeRequest, TimeAdjustment
from .repository import RequestRepository
from .workflow import RequestWorkflow

logger = logging.getLogger(__name__)


class RequestService:
    """Use cases over the three request workflows."""

    def __init__(
        self,
        requests: RequestRepository,
        handlers: dict[RequestKind, RequestHandler],
        activities: ActivityService,
        attendance: AttendanceService,
        *,
        clock=now_local,
    ):
        self._requests = requests
        self._attendance = attendance
        self._clock = clock
        self._workflows = {
            kind: RequestWorkflow(handler, requests, activities, clock=clock) for kind, handler in handlers.items()
        }

    def workflow(self, kind: RequestKind | str) -> RequestWorkflow:
        return self._workflows[RequestKind(kind)]

    def submit_leave(
        self,
        actor: Optional[Actor],
        *,
        leave_type: str,
        start_date: Optional[date],
        end_date: Optional[date],
        reason: str = "",
        attachment_name: Optional[str] = None,
        attachment_type: Optional[str] = None,
    ) -> LeaveRequest:
        payload = NewLeave(
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            attachment_name=attachment_name,
            attachment_type=attachment_type,
        )
        return self.workflow(RequestKind.LEAVE).submit(actor, payload)

    def submit_overtime(
        self,
        actor: Optional[Actor],
        *,
        work_date: Optional[date],
        hours: Optional[float],
        reason: str,
    ) -> OvertimeRequest:
        payload = NewOvertime(work_date=work_date, hours=hours, reason=reason)
        return self.workflow(RequestKind.OVERTIME).submit(actor, payload)

    def submit_time_adjustment(
        self,
        actor: Optional[Actor],
        *,
        work_date: date,
        requested_time_in: Optional[time],
        requested_time_out: Optional[time],
        reason: str,
    ) -> TimeAdjustment:
        payload = NewTimeAdjustment(
            work_date=work_date,
            requested_time_in=requested_time_in,
            requested_time_out=requested_time_out,
            reason=reason,
        )
        return self.workflow(RequestKind.TIME_ADJUSTMENT).submit(actor, payload)

    def decide(
        self,
        admin: Optional[Actor],
        kind: RequestKind | str,
        request_id: str,
        decision: RequestStatus | str,
        note: str = "",
    ) -> AnyRequest:
        return self.workflow(kind).decide(admin, request_id, decision, note)

    def approve(self, admin: Optional[Actor], kind: RequestKind | str, request_id: str, note: str = "") -> AnyRequest:
        return self.decide(admin, kind, request_id, RequestStatus.APPROVED, note)

    def reject(self, admin: Optional[Actor], kind: RequestKind | str, request_id: str, note: str = "") -> AnyRequest:
        return self.decide(admin, kind, request_id, RequestStatus.REJECTED, note)

    def list_requests(
        self,
        admin: Optional[Actor],
        kind: RequestKind | str,
        *,
        status: RequestStatus | str | None = None,
    ) -> Sequence[AnyRequest]:
        require_admin(admin)
        return self._requests.list_requests(RequestKind(kind), status=RequestStatus(status) if status else None)

    def list_my_requests(self, actor: Optional[Actor]) -> dict[str, Sequence[AnyRequest]]:
        actor = require_actor(actor)
        return {kind.value: self._requests.list_requests(kind, user_id=actor.uid) for kind in RequestKind}

    def reapply_pending_adjustments(self, admin: Optional[Actor] = None, *, system: bool = False) -> int:
        """Replay the TimeLog write for approved adjustments that never got it.

        ``system=True`` is used by the CLI command, which runs without a session.
        """

        if not system:
            require_admin(admin)
        applied = 0
        for adj in self._requests.list_unapplied_adjustments():
            now = self._clock()
            self._attendance.apply_adjustment(adj, now=now)
            self._requests.mark_adjustment_applied(adj.request_id, applied_at=now)
            applied += 1
        logger.info("Reapplied %d pending time adjustment(s)", applied)
        return applied
