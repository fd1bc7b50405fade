from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..activities.service import ActivityService
from ..common.datetime_utils import format_12h, format_hours_worked, now_local
from ..core.constants import DEFAULT_HISTORY_DAYS
from ..core.enums import ActivityType, RequestKind, RequestStatus, TimeLogStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..requests.model import TimeAdjustment
from ..requests.repository import RequestRepository
from ..schedules.model import Schedule
from ..schedules.service import SchedulePlanner
from ..users.model import Actor
from ..users.service import require_actor
from .model import AttendanceEntry, TimeLog, TodaySnapshot, time_log_id
from .repository import TimeLogRepository

logger = logging.getLogger(__name__)


def _at(day: date, value: Optional[time]) -> Optional[datetime]:
    return datetime.combine(day, value) if value is not None else None


class AttendanceService:
    """Daily clock-in/clock-out state machine plus the views derived from it."""

    def __init__(
        self,
        time_logs: TimeLogRepository,
        requests: RequestRepository,
        planner: SchedulePlanner,
        activities: ActivityService,
        *,
        clock=now_local,
        history_days: int = DEFAULT_HISTORY_DAYS,
    ):
        self._time_logs = time_logs
        self._requests = requests
        self._planner = planner
        self._activities = activities
        self._clock = clock
        self._history_days = int(history_days)

    def clock_in(self, actor: Optional[Actor], *, now: datetime | None = None) -> TimeLog:
        actor = require_actor(actor)
        now = now or self._clock()
        today = now.date()

        existing = self._time_logs.get(time_log_id(actor.uid, today))
        if existing and existing.time_in is not None:
            raise ValidationError("You have already clocked in today")

        log = TimeLog(
            user_id=actor.uid,
            date=today,
            time_in=now,
            time_out=None,
            status=TimeLogStatus.ACTIVE,
            user_name=actor.display_name,
            employee_id=actor.display_employee_id,
            created_at=now,
            updated_at=now,
        )
        self._time_logs.put(log)
        self._activities.record(actor.uid, ActivityType.TIME_IN, f"Clocked in at {format_12h(now)}")
        logger.info("Clock-in uid=%s log=%s", actor.uid, log.log_id)
        return log

    def clock_out(self, actor: Optional[Actor], *, now: datetime | None = None) -> TimeLog:
        actor = require_actor(actor)
        now = now or self._clock()

        log_id = time_log_id(actor.uid, now.date())
        existing = self._time_logs.get(log_id)
        if not existing:
            raise ValidationError("You have not clocked in today")
        if existing.time_out is not None:
            raise ValidationError("You have already clocked out today")

        if not self._time_logs.mark_clock_out(log_id, time_out=now, updated_at=now):
            raise NotFoundError("Time log not found")
        self._activities.record(actor.uid, ActivityType.TIME_OUT, f"Clocked out at {format_12h(now)}")
        logger.info("Clock-out uid=%s log=%s", actor.uid, log_id)
        return replace(existing, time_out=now, status=TimeLogStatus.COMPLETED, updated_at=now)

    def today_log(self, actor: Optional[Actor], *, today: date | None = None) -> Optional[TimeLog]:
        actor = require_actor(actor)
        return self._time_logs.get(time_log_id(actor.uid, today or self._clock().date()))

    def today_schedule(self, actor: Optional[Actor], *, today: date | None = None) -> Optional[Schedule]:
        actor = require_actor(actor)
        return self._planner.schedule_for(actor.uid, today or self._clock().date())

    def today(self, actor: Optional[Actor]) -> TodaySnapshot:
        """Dashboard view of today's log and schedule, read from the stores on every call."""
        actor = require_actor(actor)
        today = self._clock().date()
        return TodaySnapshot(
            date=today,
            time_log=self.today_log(actor, today=today),
            schedule=self.today_schedule(actor, today=today),
        )

    def reset_day(self) -> date:
        """Midnight cutover hook. Nothing is held per day, so this only records the new date."""
        today = self._clock().date()
        logger.info("Attendance day rollover: now tracking %s", today.isoformat())
        return today

    def attendance_history(
        self,
        actor: Optional[Actor],
        days: int | None = None,
        *,
        today: date | None = None,
    ) -> list[AttendanceEntry]:
        """Exactly ``days`` entries, today first, one per calendar day.

        Priority per day: approved adjustment, then the real time log, then an
        absent placeholder.
        """

        actor = require_actor(actor)
        days = int(days if days is not None else self._history_days)
        if days < 1:
            raise ValidationError("History length must be at least one day")
        today = today or self._clock().date()
        start = today - timedelta(days=days - 1)

        logs = {log.date: log for log in self._time_logs.list_for_user(actor.uid, start=start, end=today)}

        adjustments: dict[date, TimeAdjustment] = {}
        approved = self._requests.list_requests(
            RequestKind.TIME_ADJUSTMENT, status=RequestStatus.APPROVED, user_id=actor.uid
        )
        for adj in sorted(approved, key=lambda a: a.processed_at or a.created_at):
            if start <= adj.work_date <= today:
                adjustments[adj.work_date] = adj

        entries: list[AttendanceEntry] = []
        for offset in range(days):
            day = today - timedelta(days=offset)
            adj = adjustments.get(day)
            log = logs.get(day)
            if adj:
                time_in = _at(day, adj.requested.time_in or adj.original.time_in)
                time_out = _at(day, adj.requested.time_out or adj.original.time_out)
                entries.append(
                    AttendanceEntry(
                        date=day,
                        time_in=time_in,
                        time_out=time_out,
                        status=TimeLogStatus.COMPLETED,
                        source="adjustment",
                        hours_worked=format_hours_worked(time_in, time_out),
                    )
                )
            elif log:
                entries.append(
                    AttendanceEntry(
                        date=day,
                        time_in=log.time_in,
                        time_out=log.time_out,
                        status=log.status,
                        source="time_log",
                        hours_worked=log.hours_worked,
                    )
                )
            else:
                entries.append(
                    AttendanceEntry(
                        date=day,
                        time_in=None,
                        time_out=None,
                        status=TimeLogStatus.ABSENT,
                        source="placeholder",
                        hours_worked=None,
                    )
                )
        return entries

    def apply_adjustment(self, adjustment: TimeAdjustment, *, now: datetime | None = None) -> TimeLog:
        """Overwrite the TimeLog of ``adjustment.work_date`` with the requested times.

        A missing log is derived from the adjustment itself.
        """

        now = now or self._clock()
        day = adjustment.work_date
        log_id = time_log_id(adjustment.user_id, day)
        existing = self._time_logs.get(log_id)

        time_in = _at(day, adjustment.requested.time_in) or (existing.time_in if existing else None)
        time_out = _at(day, adjustment.requested.time_out) or (existing.time_out if existing else None)

        if existing:
            status = TimeLogStatus.COMPLETED if time_in and time_out else existing.status
            if not self._time_logs.overwrite_times(
                log_id, time_in=time_in, time_out=time_out, status=status, updated_at=now
            ):
                raise NotFoundError("Time log not found")
            log = replace(existing, time_in=time_in, time_out=time_out, status=status, updated_at=now)
        else:
            log = TimeLog(
                user_id=adjustment.user_id,
                date=day,
                time_in=time_in,
                time_out=time_out,
                status=TimeLogStatus.COMPLETED,
                user_name=adjustment.user_name,
                employee_id=adjustment.employee_id,
                created_at=now,
                updated_at=now,
            )
            self._time_logs.put(log)

        logger.info("Applied adjustment %s to log=%s", adjustment.request_id, log_id)
        return log

    def revert_adjustment(self, adjustment: TimeAdjustment, *, now: datetime | None = None) -> Optional[TimeLog]:
        """Put back the times recorded in ``adjustment.original``.

        A log that only existed because of the adjustment is removed.
        """

        now = now or self._clock()
        day = adjustment.work_date
        log_id = time_log_id(adjustment.user_id, day)
        existing = self._time_logs.get(log_id)
        if existing is None:
            logger.warning("Revert of adjustment %s found no log=%s", adjustment.request_id, log_id)
            return None

        time_in = _at(day, adjustment.original.time_in)
        time_out = _at(day, adjustment.original.time_out)
        if time_in is None and time_out is None:
            self._time_logs.delete(log_id)
            logger.info("Reverted adjustment %s by removing log=%s", adjustment.request_id, log_id)
            return None

        status = TimeLogStatus.COMPLETED if time_in and time_out else TimeLogStatus.ACTIVE
        if not self._time_logs.overwrite_times(
            log_id, time_in=time_in, time_out=time_out, status=status, updated_at=now
        ):
            raise NotFoundError("Time log not found")
        logger.info("Reverted adjustment %s on log=%s", adjustment.request_id, log_id)
        return replace(existing, time_in=time_in, time_out=time_out, status=status, updated_at=now)
