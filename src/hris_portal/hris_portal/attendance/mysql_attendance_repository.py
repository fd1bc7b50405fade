from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import TimeLogStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import TimeLog
from .repository import TimeLogRepository

_COLUMNS = "user_id, work_date, time_in, time_out, status, user_name, employee_id, created_at, updated_at"


def _to_time_log(r: dict) -> TimeLog:
    return TimeLog(
        user_id=r["user_id"],
        date=r["work_date"],
        time_in=r.get("time_in"),
        time_out=r.get("time_out"),
        status=TimeLogStatus(r["status"]),
        user_name=r.get("user_name") or "",
        employee_id=r.get("employee_id") or "",
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLTimeLogRepository(TimeLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, log_id: str) -> Optional[TimeLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_logs WHERE log_id=%s", (log_id,))
            r = fetchone(cur)
            return _to_time_log(r) if r else None

    def put(self, log: TimeLog) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                REPLACE INTO time_logs(log_id, user_id, work_date, time_in, time_out, status,
                                       user_name, employee_id, created_at, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    log.log_id,
                    log.user_id,
                    log.date,
                    log.time_in,
                    log.time_out,
                    log.status.value,
                    log.user_name,
                    log.employee_id,
                    log.created_at,
                    log.updated_at,
                ),
            )

    def mark_clock_out(self, log_id: str, *, time_out: datetime, updated_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE time_logs SET time_out=%s, status=%s, updated_at=%s WHERE log_id=%s",
                (time_out, TimeLogStatus.COMPLETED.value, updated_at, log_id),
            )
            return cur.rowcount > 0

    def overwrite_times(
        self,
        log_id: str,
        *,
        time_in: Optional[datetime],
        time_out: Optional[datetime],
        status: TimeLogStatus,
        updated_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE time_logs SET time_in=%s, time_out=%s, status=%s, updated_at=%s WHERE log_id=%s",
                (time_in, time_out, status.value, updated_at, log_id),
            )
            return cur.rowcount > 0

    def delete(self, log_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM time_logs WHERE log_id=%s", (log_id,))
            return cur.rowcount > 0

    def list_for_user(
        self,
        user_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[TimeLog]:
        clauses = ["user_id=%s"]
        params: list[object] = [user_id]
        if start is not None:
            clauses.append("work_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("work_date <= %s")
            params.append(end)

        sql = f"SELECT {_COLUMNS} FROM time_logs WHERE {' AND '.join(clauses)} ORDER BY work_date DESC"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_time_log(r) for r in fetchall(cur)]
