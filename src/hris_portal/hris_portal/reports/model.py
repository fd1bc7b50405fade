from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class DashboardCounts:
    pending: int
    approved: int
    total_requests: int
    approved_overtime_hours: float
    leave_requests: int
    overtime_requests: int
    time_adjustments: int


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for the attendance report / CSV export."""

    employee_id: str
    employee_name: str
    department: str
    position: str
    date: str
    time_in: Optional[datetime]
    time_out: Optional[datetime]
    status: str


@dataclass(frozen=True)
class AttendanceReport:
    start: date
    end: date
    rows: list[AttendanceReportRow]
