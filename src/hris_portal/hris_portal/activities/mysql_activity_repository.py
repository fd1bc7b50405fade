from __future__ import annotations

import json
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Activity
from .repository import ActivityRepository


class MySQLActivityRepository(ActivityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(self, activity: Activity) -> None:
        snapshot = json.dumps(activity.snapshot) if activity.snapshot is not None else None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO activities(activity_id, user_id, type, description, timestamp, snapshot)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (activity.activity_id, activity.user_id, activity.type, activity.description, activity.timestamp, snapshot),
            )

    def list_for_user(self, user_id: str, *, limit: Optional[int] = None) -> Sequence[Activity]:
        sql = """
            SELECT activity_id, user_id, type, description, timestamp, snapshot
            FROM activities
            WHERE user_id=%s
            ORDER BY timestamp DESC
        """
        params: list[object] = [user_id]
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [
                Activity(
                    activity_id=r["activity_id"],
                    user_id=r["user_id"],
                    type=r["type"],
                    description=r["description"],
                    timestamp=r["timestamp"],
                    snapshot=json.loads(r["snapshot"]) if r.get("snapshot") else None,
                )
                for r in fetchall(cur)
            ]
