from __future__ import annotations

import csv
import io
import logging
from datetime import date
from typing import Optional

from ..attendance.repository import TimeLogRepository
from ..common.datetime_utils import date_key, format_12h
from ..core.constants import REPORT_CSV_HEADER, REPORT_LOG_LIMIT
from ..core.enums import RequestKind, RequestStatus
from ..core.exceptions import ValidationError
from ..requests.repository import RequestRepository
from ..users.model import Actor
from ..users.repository import UserRepository
from ..users.service import require_admin
from .model import AttendanceReport, AttendanceReportRow, DashboardCounts

logger = logging.getLogger(__name__)


def report_filename(start: date, end: date) -> str:
    return f"time_logs_report_{date_key(start)}_to_{date_key(end)}.csv"


def render_csv(report: AttendanceReport) -> str:
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(REPORT_CSV_HEADER)
    for row in report.rows:
        writer.writerow([row.date, row.employee_name, format_12h(row.time_in), format_12h(row.time_out)])
    return out.getvalue()


class AdminAggregationService:
    """Cross-employee read side: dashboard counters and the attendance report.

    Note: counters load whole request collections and filter in memory.
    """

    def __init__(
        self,
        requests: RequestRepository,
        users: UserRepository,
        time_logs: TimeLogRepository,
        *,
        log_limit: int = REPORT_LOG_LIMIT,
    ):
        self._requests = requests
        self._users = users
        self._time_logs = time_logs
        self._log_limit = int(log_limit)

    def dashboard_counts(self, admin: Optional[Actor]) -> DashboardCounts:
        require_admin(admin)
        collections = {kind: list(self._requests.list_requests(kind)) for kind in RequestKind}
        every = [r for records in collections.values() for r in records]

        overtime_hours = sum(
            float(r.hours) for r in collections[RequestKind.OVERTIME] if r.status == RequestStatus.APPROVED
        )
        return DashboardCounts(
            pending=sum(1 for r in every if r.status == RequestStatus.PENDING),
            approved=sum(1 for r in every if r.status == RequestStatus.APPROVED),
            total_requests=len(every),
            approved_overtime_hours=overtime_hours,
            leave_requests=len(collections[RequestKind.LEAVE]),
            overtime_requests=len(collections[RequestKind.OVERTIME]),
            time_adjustments=len(collections[RequestKind.TIME_ADJUSTMENT]),
        )

    def generate_attendance_report(self, admin: Optional[Actor], *, start: date, end: date) -> AttendanceReport:
        admin = require_admin(admin)
        if end < start:
            raise ValidationError("End date cannot be before start date")

        start_key, end_key = date_key(start), date_key(end)
        rows: list[AttendanceReportRow] = []
        for employee in self._users.list_all():
            logs = self._time_logs.list_for_user(employee.uid, start=start, end=end, limit=self._log_limit)
            for log in logs:
                day = date_key(log.date)
                if not start_key <= day <= end_key:
                    continue
                rows.append(
                    AttendanceReportRow(
                        employee_id=employee.employee_id,
                        employee_name=employee.name or log.user_name,
                        department=employee.department,
                        position=employee.position,
                        date=day,
                        time_in=log.time_in,
                        time_out=log.time_out,
                        status=log.status.value,
                    )
                )

        rows.sort(key=lambda r: (r.date, r.employee_name))
        logger.info("Admin uid=%s generated attendance report %s..%s (%d rows)", admin.uid, start_key, end_key, len(rows))
        return AttendanceReport(start=start, end=end, rows=rows)
