from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import RequestKind, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import AnyRequest, LeaveRequest, OvertimeRequest, TimeAdjustment, TimePair
from .repository import RequestRepository

_TABLES = {
    RequestKind.LEAVE: "leave_requests",
    RequestKind.OVERTIME: "overtime_requests",
    RequestKind.TIME_ADJUSTMENT: "time_adjustments",
}

_COMMON = "request_id, user_id, user_name, employee_id, reason, status, admin_note, created_at, processed_at, processed_by"

_COLUMNS = {
    RequestKind.LEAVE: f"{_COMMON}, leave_type, start_date, end_date, days, has_attachment, attachment_name, attachment_type",
    RequestKind.OVERTIME: f"{_COMMON}, work_date, hours",
    RequestKind.TIME_ADJUSTMENT: (
        f"{_COMMON}, work_date, original_time_in, original_time_out, "
        "requested_time_in, requested_time_out, applied_at"
    ),
}


def _to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=r["request_id"],
        user_id=r["user_id"],
        user_name=r["user_name"],
        employee_id=r["employee_id"],
        leave_type=r["leave_type"],
        start_date=r["start_date"],
        end_date=r["end_date"],
        days=int(r["days"]),
        reason=r.get("reason") or "",
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        has_attachment=bool(r.get("has_attachment")),
        attachment_name=r.get("attachment_name"),
        attachment_type=r.get("attachment_type"),
        admin_note=r.get("admin_note") or "",
        processed_at=r.get("processed_at"),
        processed_by=r.get("processed_by"),
    )


def _to_overtime(r: dict) -> OvertimeRequest:
    return OvertimeRequest(
        request_id=r["request_id"],
        user_id=r["user_id"],
        user_name=r["user_name"],
        employee_id=r["employee_id"],
        work_date=r["work_date"],
        hours=float(r["hours"]),
        reason=r.get("reason") or "",
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        admin_note=r.get("admin_note") or "",
        processed_at=r.get("processed_at"),
        processed_by=r.get("processed_by"),
    )


def _to_adjustment(r: dict) -> TimeAdjustment:
    return TimeAdjustment(
        request_id=r["request_id"],
        user_id=r["user_id"],
        user_name=r["user_name"],
        employee_id=r["employee_id"],
        work_date=r["work_date"],
        original=TimePair(normalize_mysql_time(r.get("original_time_in")), normalize_mysql_time(r.get("original_time_out"))),
        requested=TimePair(
            normalize_mysql_time(r.get("requested_time_in")), normalize_mysql_time(r.get("requested_time_out"))
        ),
        reason=r.get("reason") or "",
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        admin_note=r.get("admin_note") or "",
        processed_at=r.get("processed_at"),
        processed_by=r.get("processed_by"),
        applied_at=r.get("applied_at"),
    )


_MAPPERS = {
    RequestKind.LEAVE: _to_leave,
    RequestKind.OVERTIME: _to_overtime,
    RequestKind.TIME_ADJUSTMENT: _to_adjustment,
}


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(self, record: AnyRequest) -> None:
        common = (
            record.request_id,
            record.user_id,
            record.user_name,
            record.employee_id,
            record.reason,
            record.status.value,
            record.admin_note,
            record.created_at,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            if isinstance(record, LeaveRequest):
                cur.execute(
                    """
                    INSERT INTO leave_requests(
                        request_id, user_id, user_name, employee_id, reason, status, admin_note, created_at,
                        leave_type, start_date, end_date, days, has_attachment, attachment_name, attachment_type
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    common
                    + (
                        record.leave_type,
                        record.start_date,
                        record.end_date,
                        record.days,
                        int(record.has_attachment),
                        record.attachment_name,
                        record.attachment_type,
                    ),
                )
            elif isinstance(record, OvertimeRequest):
                cur.execute(
                    """
                    INSERT INTO overtime_requests(
                        request_id, user_id, user_name, employee_id, reason, status, admin_note, created_at,
                        work_date, hours
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    common + (record.work_date, record.hours),
                )
            elif isinstance(record, TimeAdjustment):
                cur.execute(
                    """
                    INSERT INTO time_adjustments(
                        request_id, user_id, user_name, employee_id, reason, status, admin_note, created_at,
                        work_date, original_time_in, original_time_out, requested_time_in, requested_time_out
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    common
                    + (
                        record.work_date,
                        record.original.time_in,
                        record.original.time_out,
                        record.requested.time_in,
                        record.requested.time_out,
                    ),
                )
            else:
                raise TypeError(f"Unsupported request record: {type(record)!r}")

    def get(self, kind: RequestKind, request_id: str) -> Optional[AnyRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS[kind]} FROM {_TABLES[kind]} WHERE request_id=%s", (request_id,))
            r = fetchone(cur)
            return _MAPPERS[kind](r) if r else None

    def decide(
        self,
        kind: RequestKind,
        request_id: str,
        *,
        status: RequestStatus,
        admin_note: str,
        processed_at: datetime,
        processed_by: str,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE {_TABLES[kind]}
                SET status=%s, admin_note=%s, processed_at=%s, processed_by=%s
                WHERE request_id=%s
                """,
                (status.value, admin_note, processed_at, processed_by, request_id),
            )
            return cur.rowcount > 0

    def list_requests(
        self,
        kind: RequestKind,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[str] = None,
    ) -> Sequence[AnyRequest]:
        where, params = build_where({"status": status.value if status else None, "user_id": user_id})
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS[kind]} FROM {_TABLES[kind]} {where} ORDER BY created_at DESC",
                tuple(params),
            )
            return [_MAPPERS[kind](r) for r in fetchall(cur)]

    def mark_adjustment_applied(self, request_id: str, *, applied_at: Optional[datetime]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE time_adjustments SET applied_at=%s WHERE request_id=%s", (applied_at, request_id))
            return cur.rowcount > 0

    def list_unapplied_adjustments(self) -> Sequence[TimeAdjustment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS[RequestKind.TIME_ADJUSTMENT]}
                FROM time_adjustments
                WHERE status=%s AND applied_at IS NULL
                ORDER BY processed_at ASC
                """,
                (RequestStatus.APPROVED.value,),
            )
            return [_to_adjustment(r) for r in fetchall(cur)]
