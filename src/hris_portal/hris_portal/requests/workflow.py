from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Optional

from ..activities.service import ActivityService
from ..common.datetime_utils import now_local
from ..common.serialization import to_jsonable
from ..core.enums import ActivityType, RequestStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import Actor
from ..users.service import require_actor, require_admin
from .handlers.base import RequestHandler
from .model import AnyRequest
from .repository import RequestRepository

logger = logging.getLogger(__name__)


class RequestWorkflow:
    """pending -> approved | rejected, for one request kind.

    Every submission and every decision appends an Activity; approvals run the
    handler's ``on_approved`` hook after the status write.
    """

    def __init__(
        self,
        handler: RequestHandler,
        requests: RequestRepository,
        activities: ActivityService,
        *,
        clock=now_local,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ):
        self._handler = handler
        self._requests = requests
        self._activities = activities
        self._clock = clock
        self._id_factory = id_factory

    @property
    def kind(self):
        return self._handler.kind

    def submit(self, actor: Optional[Actor], payload: Any) -> AnyRequest:
        actor = require_actor(actor)
        now = self._clock()
        record = self._handler.build(request_id=self._id_factory(), actor=actor, payload=payload, now=now)

        self._requests.insert(record)
        self._activities.record(
            actor.uid,
            self._handler.activity_type,
            self._handler.describe_submission(record),
            snapshot={"kind": self.kind.value, **to_jsonable(record)},
        )
        logger.info("Submitted %s %s by uid=%s", self.kind.value, record.request_id, actor.uid)
        return record

    def get(self, request_id: str) -> AnyRequest:
        record = self._requests.get(self.kind, request_id)
        if record is None:
            raise NotFoundError(f"{self.kind.label.capitalize()} not found")
        return record

    def decide(
        self,
        admin: Optional[Actor],
        request_id: str,
        decision: RequestStatus | str,
        note: str = "",
    ) -> AnyRequest:
        admin = require_admin(admin)
        try:
            decision = RequestStatus(decision)
        except ValueError:
            raise ValidationError(f"Unknown decision: {decision!r}")
        if not decision.is_terminal:
            raise ValidationError("A decision must be approved or rejected")

        record = self.get(request_id)
        if record.status.is_terminal:
            logger.warning(
                "Re-deciding %s %s: %s -> %s by uid=%s",
                self.kind.value,
                request_id,
                record.status.value,
                decision.value,
                admin.uid,
            )

        now = self._clock()
        note = (note or "").strip()
        if not self._requests.decide(
            self.kind,
            request_id,
            status=decision,
            admin_note=note,
            processed_at=now,
            processed_by=admin.uid,
        ):
            raise NotFoundError(f"{self.kind.label.capitalize()} not found")
        decided = self.get(request_id)
        logger.info("Decided %s %s -> %s by uid=%s", self.kind.value, request_id, decision.value, admin.uid)

        description = f"Your {self.kind.label} was {decision.value}"
        if note:
            description += f": {note}"
        self._activities.record(
            decided.user_id,
            ActivityType.REQUEST_DECISION,
            description,
            snapshot={"kind": self.kind.value, **to_jsonable(decided)},
        )

        if decision == RequestStatus.APPROVED:
            self._handler.on_approved(decided, now=now)
        elif record.status == RequestStatus.APPROVED:
            self._handler.on_revoked(decided, now=now)
        return decided
