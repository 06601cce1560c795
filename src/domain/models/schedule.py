from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Direction(str, Enum):
    OUTBOUND = "I"
    INBOUND = "V"
    CIRCULAR = "C"


@dataclass(frozen=True, slots=True)
class ScheduleEntry:
    line: str
    direction: Direction
    hour: int
    minute: int
    stop_id: str | None = None

    @property
    def minute_of_day(self) -> int:
        return self.hour * 60 + self.minute

    @property
    def time_text(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


@dataclass(frozen=True, slots=True)
class ScheduledTime:
    time: str
    minutes_from_now: int
