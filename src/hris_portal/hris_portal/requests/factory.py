from __future__ import annotations

from dataclasses import dataclass

from ..attendance.repository import TimeLogRepository
from ..attendance.service import AttendanceService
from ..core.enums import RequestKind
from .handlers.base import RequestHandler
from .handlers.leave_handler import LeaveHandler
from .handlers.overtime_handler import OvertimeHandler
from .handlers.time_adjustment_handler import TimeAdjustmentHandler
from .repository import RequestRepository


@dataclass
class RequestHandlerFactory:
    """Factory Pattern: one handler per request kind."""

    time_logs: TimeLogRepository
    attendance: AttendanceService
    requests: RequestRepository

    def build_all(self) -> dict[RequestKind, RequestHandler]:
        handlers: list[RequestHandler] = [
            LeaveHandler(),
            OvertimeHandler(),
            TimeAdjustmentHandler(self.time_logs, self.attendance, self.requests),
        ]
        return {h.kind: h for h in handlers}
