from __future__ import annotations

import logging
import uuid
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import date_key, now_local
from ..core.constants import DEFAULT_ACTIVITY_LIMIT, DEFAULT_FEED_LIMIT
from ..core.enums import ActivityType, RequestKind
from ..requests.model import AnyRequest, LeaveRequest, OvertimeRequest
from ..requests.repository import RequestRepository
from .model import Activity, FeedItem
from .repository import ActivityRepository

logger = logging.getLogger(__name__)

_FEED_LABELS = {
    RequestKind.LEAVE: "Leave Request",
    RequestKind.OVERTIME: "Overtime Request",
    RequestKind.TIME_ADJUSTMENT: "Time Adjustment",
}


def _hours_label(hours: float) -> str:
    return f"{hours:g}"


def describe_request(record: AnyRequest) -> str:
    """Short human-readable summary used in the combined feed."""
    if isinstance(record, LeaveRequest):
        return f"{record.leave_type} - {record.days} day(s)"
    if isinstance(record, OvertimeRequest):
        return f"{_hours_label(record.hours)} hour(s) overtime"
    return f"Adjustment request for {date_key(record.work_date)}"


class ActivityService:
    def __init__(
        self,
        activities: ActivityRepository,
        requests: RequestRepository,
        *,
        clock=now_local,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ):
        self._activities = activities
        self._requests = requests
        self._clock = clock
        self._id_factory = id_factory

    def record(
        self,
        user_id: str,
        activity_type: ActivityType,
        description: str,
        *,
        snapshot: Optional[dict] = None,
    ) -> Activity:
        activity = Activity(
            activity_id=self._id_factory(),
            user_id=user_id,
            type=activity_type.value,
            description=description,
            timestamp=self._clock(),
            snapshot=snapshot,
        )
        self._activities.insert(activity)
        logger.debug("Activity %s for uid=%s: %s", activity.type, user_id, description)
        return activity

    def recent(self, user_id: str, *, limit: int = DEFAULT_ACTIVITY_LIMIT) -> Sequence[Activity]:
        return self._activities.list_for_user(user_id, limit=limit)

    def combined_feed(self, user_id: str, *, limit: int = DEFAULT_FEED_LIMIT) -> list[FeedItem]:
        items = [
            FeedItem(
                item_id=a.activity_id,
                type=a.type,
                description=a.description,
                timestamp=a.timestamp,
                status="completed",
            )
            for a in self._activities.list_for_user(user_id)
        ]
        for kind in RequestKind:
            for record in self._requests.list_requests(kind, user_id=user_id):
                items.append(
                    FeedItem(
                        item_id=record.request_id,
                        type=_FEED_LABELS[kind],
                        description=describe_request(record),
                        timestamp=record.created_at,
                        status=record.status.value,
                    )
                )

        items.sort(key=lambda item: item.timestamp, reverse=True)
        return items[:limit]
