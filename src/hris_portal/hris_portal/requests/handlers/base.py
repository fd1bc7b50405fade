from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from ...core.enums import ActivityType, RequestKind
from ...users.model import Actor
from ..model import AnyRequest


class RequestHandler(ABC):
    """Strategy for one request kind: validation, record shape, side effects."""

    kind: RequestKind
    activity_type: ActivityType

    @abstractmethod
    def build(self, *, request_id: str, actor: Actor, payload: Any, now: datetime) -> AnyRequest:
        """Validate ``payload`` and return the pending record to insert."""

        raise NotImplementedError

    @abstractmethod
    def describe_submission(self, record: AnyRequest) -> str:
        raise NotImplementedError

    def on_approved(self, record: AnyRequest, *, now: datetime) -> None:
        """Cross-entity side effect of an approval; none by default."""

    def on_revoked(self, record: AnyRequest, *, now: datetime) -> None:
        """Undo :meth:`on_approved` when an approved request is later rejected."""
