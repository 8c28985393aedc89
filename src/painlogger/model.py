from __future__ import annotations

from datetime import date, datetime
from enum import Enum, IntEnum
from typing import Iterator


class PainLevel(IntEnum):
    NONE = 0
    MILD = 1
    MODERATE = 2
    SEVERE = 3

    @property
    def label(self) -> str:
        return PAIN_LABELS[self]

    @property
    def color(self) -> str:
        return PAIN_COLORS[self]


PAIN_LABELS = {
    PainLevel.NONE: "No Pain",
    PainLevel.MILD: "Mild Pain",
    PainLevel.MODERATE: "Moderate Pain",
    PainLevel.SEVERE: "Severe Pain",
}

PAIN_COLORS = {
    PainLevel.NONE: "#22c55e",  # green
    PainLevel.MILD: "#facc15",  # yellow
    PainLevel.MODERATE: "#f97316",  # orange
    PainLevel.SEVERE: "#dc2626",  # red
}


class TimeSlot(str, Enum):
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    NIGHT = "Night"

    @property
    def arc(self) -> tuple[int, int]:
        """(start, end) in degrees, clockwise from 3 o'clock."""
        return SLOT_ARCS[self]


SLOT_ARCS = {
    TimeSlot.MORNING: (-90, 30),
    TimeSlot.AFTERNOON: (30, 150),
    TimeSlot.NIGHT: (150, 270),
}

TIME_SLOTS: tuple[TimeSlot, ...] = (TimeSlot.MORNING, TimeSlot.AFTERNOON, TimeSlot.NIGHT)

# Calendar placeholders
NO_DATA_COLOR = "#d1d5db"  # future days, and past days with nothing logged
EMPTY_SLOT_COLOR = ""  # tk: empty string draws nothing

DayRecord = dict[TimeSlot, PainLevel]


def day_key(value: date | datetime) -> date:
    """
    Truncate an instant to its local calendar day.
    - date -> unchanged
    - naive datetime -> assumed local
    - aware datetime -> converted to local zone first
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


class PainLog:
    def __init__(self) -> None:
        self._days: dict[date, DayRecord] = {}

    def __len__(self) -> int:
        return len(self._days)

    def __contains__(self, day: object) -> bool:
        if not isinstance(day, (date, datetime)):
            return False
        return day_key(day) in self._days

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PainLog):
            return NotImplemented
        return self._days == other._days

    def __repr__(self) -> str:
        return f"PainLog({len(self._days)} days)"

    def record_entry(self, day: date | datetime, slot: TimeSlot | str, level: PainLevel | int) -> None:
        key = day_key(day)
        self._days.setdefault(key, {})[TimeSlot(slot)] = PainLevel(level)

    def lookup(self, day: date | datetime) -> DayRecord:
        return dict(self._days.get(day_key(day), {}))

    def days(self) -> list[date]:
        return sorted(self._days)

    def items(self) -> Iterator[tuple[date, DayRecord]]:
        """Ascending by day."""
        for d in self.days():
            yield d, dict(self._days[d])

    def colors_for_day(self, day: date | datetime, today: date | datetime) -> tuple[str, str, str]:
        d = day_key(day)
        if d > day_key(today):
            return (NO_DATA_COLOR, NO_DATA_COLOR, NO_DATA_COLOR)

        rec = self._days.get(d)
        if not rec:
            # past day with nothing logged looks the same as a future day
            return (NO_DATA_COLOR, NO_DATA_COLOR, NO_DATA_COLOR)

        m, a, n = (rec[s].color if s in rec else EMPTY_SLOT_COLOR for s in TIME_SLOTS)
        return (m, a, n)
