from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Activity


class ActivityRepository(Protocol):
    def insert(self, activity: Activity) -> None:
        raise NotImplementedError

    def list_for_user(self, user_id: str, *, limit: Optional[int] = None) -> Sequence[Activity]:
        """Newest first."""

        raise NotImplementedError
