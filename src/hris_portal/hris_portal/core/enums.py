from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles carried by the signed-in actor."""

    EMPLOYEE = "employee"
    ADMIN = "admin"


class TimeLogStatus(str, Enum):
    """Daily attendance state. ABSENT is never stored, only synthesised in history views."""

    ACTIVE = "active"
    COMPLETED = "completed"
    ABSENT = "absent"


class RequestStatus(str, Enum):
    """Approval lifecycle shared by every request kind."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not RequestStatus.PENDING


class RequestKind(str, Enum):
    LEAVE = "leave"
    OVERTIME = "overtime"
    TIME_ADJUSTMENT = "time-adjustment"

    @property
    def label(self) -> str:
        return {
            RequestKind.LEAVE: "leave request",
            RequestKind.OVERTIME: "overtime request",
            RequestKind.TIME_ADJUSTMENT: "time adjustment request",
        }[self]


class ShiftType(str, Enum):
    SEVEN_TO_FOUR = "7-4"
    EIGHT_TO_FIVE = "8-5"
    OFF = "off"
    CUSTOM = "custom"


class ActivityType(str, Enum):
    TIME_IN = "time_in"
    TIME_OUT = "time_out"
    LEAVE_REQUEST = "leave_request"
    OVERTIME_REQUEST = "overtime_request"
    TIME_ADJUSTMENT = "time_adjustment"
    REQUEST_DECISION = "request_decision"


LEAVE_TYPES = (
    "Vacation Leave (VL)",
    "Sick Leave (SL)",
    "Leave Without Pay (LWOP)",
    "Maternity Leave",
    "Paternity Leave",
)
