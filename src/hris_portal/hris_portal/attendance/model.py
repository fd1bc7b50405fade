from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import date_key, format_hours_worked
from ..core.constants import UNKNOWN_EMPLOYEE_ID, UNKNOWN_NAME
from ..core.enums import TimeLogStatus
from ..schedules.model import Schedule


def time_log_id(user_id: str, day: date) -> str:
    """Deterministic key: at most one TimeLog per user per calendar day."""
    return f"{user_id}_{date_key(day)}"


@dataclass(frozen=True)
class TimeLog:
    """Domain entity: one day's clock-in/clock-out record for one user."""

    user_id: str
    date: date
    time_in: Optional[datetime]
    time_out: Optional[datetime]
    status: TimeLogStatus
    user_name: str = UNKNOWN_NAME
    employee_id: str = UNKNOWN_EMPLOYEE_ID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def log_id(self) -> str:
        return time_log_id(self.user_id, self.date)

    @property
    def hours_worked(self) -> Optional[str]:
        return format_hours_worked(self.time_in, self.time_out)


@dataclass(frozen=True)
class AttendanceEntry:
    """One row of the attendance history view.

    ``source`` tells where the times came from: an approved adjustment, the
    real time log, or a synthetic absent placeholder.
    """

    date: date
    time_in: Optional[datetime]
    time_out: Optional[datetime]
    status: TimeLogStatus
    source: str
    hours_worked: Optional[str]


@dataclass(frozen=True)
class TodaySnapshot:
    date: date
    time_log: Optional[TimeLog]
    schedule: Optional[Schedule]

    @property
    def hours_worked(self) -> Optional[str]:
        return self.time_log.hours_worked if self.time_log else None
