from __future__ import annotations

import calendar
import logging
import uuid
from dataclasses import replace
from datetime import date, time
from typing import Callable, Optional

from ..common.datetime_utils import date_key, now_local
from ..core.enums import ShiftType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import Actor
from ..users.repository import UserRepository
from ..users.service import require_actor, require_admin
from .model import SHIFT_PRESETS, MonthGrid, Schedule
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)


def month_grid(year: int, month: int) -> MonthGrid:
    """Sunday-first month grid: leading blanks, then one cell per day."""
    if not 1 <= int(month) <= 12:
        raise ValidationError("Month must be between 1 and 12")
    first = date(int(year), int(month), 1)
    offset = (first.weekday() + 1) % 7
    days_in_month = calendar.monthrange(first.year, first.month)[1]
    cells: list = [None] * offset
    cells.extend(date(first.year, first.month, d) for d in range(1, days_in_month + 1))
    return MonthGrid(year=first.year, month=first.month, cells=cells)


class SchedulePlanner:
    def __init__(
        self,
        schedules: ScheduleRepository,
        users: UserRepository,
        *,
        clock=now_local,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ):
        self._schedules = schedules
        self._users = users
        self._clock = clock
        self._id_factory = id_factory

    month_grid = staticmethod(month_grid)

    def month_schedules(self, user_id: str, year: int, month: int) -> dict[str, Schedule]:
        """Schedules of one month keyed by ``YYYY-MM-DD``."""
        return {
            date_key(s.date): s
            for s in self._schedules.list_for_month(user_id=user_id, year=int(year), month=int(month))
        }

    def view_month(self, actor: Optional[Actor], user_id: str, year: int, month: int) -> dict[str, Schedule]:
        actor = require_actor(actor)
        if user_id != actor.uid and not actor.is_admin:
            raise AuthorizationError("You can only view your own schedule")
        return self.month_schedules(user_id, year, month)

    def schedule_for(self, user_id: str, day: date) -> Optional[Schedule]:
        return self.month_schedules(user_id, day.year, day.month).get(date_key(day))

    @staticmethod
    def resolve_shift(shift_type: str, time_in: Optional[time], time_out: Optional[time]) -> tuple[ShiftType, Optional[time], Optional[time]]:
        try:
            shift = ShiftType(shift_type)
        except ValueError:
            raise ValidationError(f"Unknown shift type: {shift_type!r}")

        preset = SHIFT_PRESETS.get(shift)
        if preset:
            return shift, preset.time_in, preset.time_out

        if time_in is None or time_out is None:
            raise ValidationError("Custom shifts need both time in and time out")
        return shift, time_in, time_out

    def upsert_schedule(
        self,
        admin: Optional[Actor],
        employee_uid: str,
        day: date,
        *,
        shift_type: str,
        time_in: Optional[time] = None,
        time_out: Optional[time] = None,
    ) -> Schedule:
        admin = require_admin(admin)
        if not self._users.get_by_uid(employee_uid):
            raise NotFoundError("Employee not found")

        shift, time_in, time_out = self.resolve_shift(shift_type, time_in, time_out)
        now = self._clock()

        existing = self.month_schedules(employee_uid, day.year, day.month).get(date_key(day))
        if existing:
            updated = replace(existing, time_in=time_in, time_out=time_out, shift_type=shift, updated_at=now)
            if not self._schedules.update(updated):
                raise NotFoundError("Schedule not found")
            logger.info("Admin uid=%s updated schedule %s for uid=%s on %s", admin.uid, existing.schedule_id, employee_uid, day)
            return updated

        schedule = Schedule(
            schedule_id=self._id_factory(),
            user_id=employee_uid,
            date=day,
            time_in=time_in,
            time_out=time_out,
            shift_type=shift,
            created_at=now,
            updated_at=now,
        )
        self._schedules.insert(schedule)
        logger.info("Admin uid=%s created schedule %s for uid=%s on %s", admin.uid, schedule.schedule_id, employee_uid, day)
        return schedule
