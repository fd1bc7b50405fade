from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Activity:
    """Append-only audit entry shown in a user's recent-activity feed."""

    activity_id: str
    user_id: str
    type: str
    description: str
    timestamp: datetime
    snapshot: Optional[dict] = None


@dataclass(frozen=True)
class FeedItem:
    """Read-model merging activities with the user's own requests."""

    item_id: str
    type: str
    description: str
    timestamp: datetime
    status: str
