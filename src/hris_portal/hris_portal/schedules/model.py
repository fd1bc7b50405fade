from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import ShiftType


@dataclass(frozen=True)
class Schedule:
    schedule_id: str
    user_id: str
    date: date
    time_in: Optional[time]
    time_out: Optional[time]
    shift_type: ShiftType
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def year(self) -> int:
        return self.date.year

    @property
    def month(self) -> int:
        return self.date.month

    @property
    def is_day_off(self) -> bool:
        return self.shift_type == ShiftType.OFF


@dataclass(frozen=True)
class ShiftPreset:
    shift_type: ShiftType
    label: str
    time_in: Optional[time]
    time_out: Optional[time]


SHIFT_PRESETS = {
    ShiftType.SEVEN_TO_FOUR: ShiftPreset(ShiftType.SEVEN_TO_FOUR, "7:00 AM - 4:00 PM", time(7, 0), time(16, 0)),
    ShiftType.EIGHT_TO_FIVE: ShiftPreset(ShiftType.EIGHT_TO_FIVE, "8:00 AM - 5:00 PM", time(8, 0), time(17, 0)),
    ShiftType.OFF: ShiftPreset(ShiftType.OFF, "Rest Day / Day Off", None, None),
}


@dataclass(frozen=True)
class MonthGrid:
    """Calendar month laid out in 7 columns starting on Sunday.

    ``cells`` holds ``None`` for the leading blanks, then one date per day.
    """

    year: int
    month: int
    cells: list

    @property
    def leading_blanks(self) -> int:
        return sum(1 for c in self.cells if c is None)

    @property
    def weeks(self) -> list[list[Optional[date]]]:
        return [self.cells[i : i + 7] for i in range(0, len(self.cells), 7)]
