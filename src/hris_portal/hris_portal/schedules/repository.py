from __future__ import annotations

from typing import Protocol, Sequence

from .model import Schedule


class ScheduleRepository(Protocol):
    def list_for_month(self, *, user_id: str, year: int, month: int) -> Sequence[Schedule]:
        raise NotImplementedError

    def insert(self, schedule: Schedule) -> None:
        raise NotImplementedError

    def update(self, schedule: Schedule) -> bool:
        """Overwrite times/shift of an existing schedule; False when the id is unknown."""

        raise NotImplementedError
