from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .estimate import ArrivalEstimate, StopsRemaining
from .schedule import ScheduledTime
from .stop import Stop


class SearchStatus(str, Enum):
    NOT_READY = "not_ready"
    NO_RESULTS = "no_results"
    OK = "ok"


class SearchMode(str, Enum):
    STOPS = "stops"
    DIRECT = "direct"


@dataclass(frozen=True, slots=True)
class LineResult:
    """One rider-facing row: the best vehicle found for a line."""

    line: str
    estimate: ArrivalEstimate
    vehicle_distance_m: int
    stop: Stop | None = None
    stop_distance_m: int | None = None
    stops_remaining: StopsRemaining | None = None
    schedules: tuple[ScheduledTime, ...] = ()

    @property
    def stops_count(self) -> int | None:
        if self.stops_remaining is None:
            return None
        return self.stops_remaining.count

    @property
    def summary(self) -> str:
        return f"{self.line} – {self.estimate.minutes} min"


@dataclass(frozen=True, slots=True)
class SearchResult:
    status: SearchStatus
    mode: SearchMode | None = None
    rows: tuple[LineResult, ...] = ()
    suppressed_lines: int = 0
    nearby_stops: int = 0
    vehicles_fetched_at: datetime | None = None
    stops_fetched_at: datetime | None = None
    schedules_fetched_at: datetime | None = None
