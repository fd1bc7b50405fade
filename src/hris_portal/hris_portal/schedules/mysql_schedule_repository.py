from __future__ import annotations

from typing import Sequence

from ..core.enums import ShiftType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_time
from .model import Schedule
from .repository import ScheduleRepository


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_month(self, *, user_id: str, year: int, month: int) -> Sequence[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT schedule_id, user_id, work_date, time_in, time_out, shift_type, created_at, updated_at
                FROM schedules
                WHERE user_id=%s AND year=%s AND month=%s
                ORDER BY work_date ASC
                """,
                (user_id, int(year), int(month)),
            )
            return [
                Schedule(
                    schedule_id=r["schedule_id"],
                    user_id=r["user_id"],
                    date=r["work_date"],
                    time_in=normalize_mysql_time(r.get("time_in")),
                    time_out=normalize_mysql_time(r.get("time_out")),
                    shift_type=ShiftType(r.get("shift_type") or ShiftType.CUSTOM.value),
                    created_at=r.get("created_at"),
                    updated_at=r.get("updated_at"),
                )
                for r in fetchall(cur)
            ]

    def insert(self, schedule: Schedule) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO schedules(schedule_id, user_id, work_date, time_in, time_out, shift_type, year, month,
                                      created_at, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    schedule.schedule_id,
                    schedule.user_id,
                    schedule.date,
                    schedule.time_in,
                    schedule.time_out,
                    schedule.shift_type.value,
                    schedule.year,
                    schedule.month,
                    schedule.created_at,
                    schedule.updated_at,
                ),
            )

    def update(self, schedule: Schedule) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE schedules
                SET time_in=%s, time_out=%s, shift_type=%s, updated_at=%s
                WHERE schedule_id=%s
                """,
                (schedule.time_in, schedule.time_out, schedule.shift_type.value, schedule.updated_at, schedule.schedule_id),
            )
            return cur.rowcount > 0
