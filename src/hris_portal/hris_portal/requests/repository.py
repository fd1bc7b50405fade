from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestKind, RequestStatus
from .model import AnyRequest, TimeAdjustment


class RequestRepository(Protocol):
    """One store for the three request collections, addressed by kind."""

    def insert(self, record: AnyRequest) -> None:
        raise NotImplementedError

    def get(self, kind: RequestKind, request_id: str) -> Optional[AnyRequest]:
        raise NotImplementedError

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
        """Overwrite the decision fields; returns False when the id is unknown."""

        raise NotImplementedError

    def list_requests(
        self,
        kind: RequestKind,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[str] = None,
    ) -> Sequence[AnyRequest]:
        """Newest first (by created_at)."""

        raise NotImplementedError

    def mark_adjustment_applied(self, request_id: str, *, applied_at: Optional[datetime]) -> bool:
        raise NotImplementedError

    def list_unapplied_adjustments(self) -> Sequence[TimeAdjustment]:
        """Approved adjustments whose TimeLog write has not happened yet."""

        raise NotImplementedError
