from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import ClassVar, Optional, Union

from ..core.enums import RequestKind, RequestStatus


@dataclass(frozen=True)
class TimePair:
    time_in: Optional[time] = None
    time_out: Optional[time] = None


@dataclass(frozen=True)
class LeaveRequest:
    kind: ClassVar[RequestKind] = RequestKind.LEAVE

    request_id: str
    user_id: str
    user_name: str
    employee_id: str
    leave_type: str
    start_date: date
    end_date: date
    days: int
    reason: str
    status: RequestStatus
    created_at: datetime
    has_attachment: bool = False
    attachment_name: Optional[str] = None
    attachment_type: Optional[str] = None
    admin_note: str = ""
    processed_at: Optional[datetime] = None
    processed_by: Optional[str] = None


@dataclass(frozen=True)
class OvertimeRequest:
    kind: ClassVar[RequestKind] = RequestKind.OVERTIME

    request_id: str
    user_id: str
    user_name: str
    employee_id: str
    work_date: date
    hours: float
    reason: str
    status: RequestStatus
    created_at: datetime
    admin_note: str = ""
    processed_at: Optional[datetime] = None
    processed_by: Optional[str] = None


@dataclass(frozen=True)
class TimeAdjustment:
    """Request to replace a day's clock-in/clock-out times.

    ``applied_at`` is set only once the approved times have been written to the
    TimeLog; approved adjustments without it are still owed that write.
    """

    kind: ClassVar[RequestKind] = RequestKind.TIME_ADJUSTMENT

    request_id: str
    user_id: str
    user_name: str
    employee_id: str
    work_date: date
    original: TimePair
    requested: TimePair
    reason: str
    status: RequestStatus
    created_at: datetime
    admin_note: str = ""
    processed_at: Optional[datetime] = None
    processed_by: Optional[str] = None
    applied_at: Optional[datetime] = None


AnyRequest = Union[LeaveRequest, OvertimeRequest, TimeAdjustment]


@dataclass(frozen=True)
class NewLeave:
    leave_type: str
    start_date: Optional[date]
    end_date: Optional[date]
    reason: str = ""
    attachment_name: Optional[str] = None
    attachment_type: Optional[str] = None


@dataclass(frozen=True)
class NewOvertime:
    work_date: Optional[date]
    hours: Optional[float]
    reason: str


@dataclass(frozen=True)
class NewTimeAdjustment:
    work_date: date
    requested_time_in: Optional[time]
    requested_time_out: Optional[time]
    reason: str
