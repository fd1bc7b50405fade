from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import TimeLogStatus
from .model import TimeLog


class TimeLogRepository(Protocol):
    def get(self, log_id: str) -> Optional[TimeLog]:
        raise NotImplementedError

    def put(self, log: TimeLog) -> None:
        """Write the whole record under ``log.log_id``, replacing any existing one."""

        raise NotImplementedError

    def mark_clock_out(self, log_id: str, *, time_out: datetime, updated_at: datetime) -> bool:
        raise NotImplementedError

    def overwrite_times(
        self,
        log_id: str,
        *,
        time_in: Optional[datetime],
        time_out: Optional[datetime],
        status: TimeLogStatus,
        updated_at: datetime,
    ) -> bool:
        """Override used when a time adjustment is applied or revoked."""

        raise NotImplementedError

    def delete(self, log_id: str) -> bool:
        raise NotImplementedError

    def list_for_user(
        self,
        user_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[TimeLog]:
        """Newest date first."""

        raise NotImplementedError
