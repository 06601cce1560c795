from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .realtime import VehicleObservation
from .schedule import ScheduleEntry
from .stop import Stop


@dataclass(frozen=True, slots=True)
class VehicleSnapshot:
    vehicles: tuple[VehicleObservation, ...]
    fetched_at: datetime


@dataclass(frozen=True, slots=True)
class StopSnapshot:
    stops: tuple[Stop, ...]
    fetched_at: datetime


@dataclass(frozen=True, slots=True)
class ScheduleSnapshot:
    entries: tuple[ScheduleEntry, ...]
    fetched_at: datetime


@dataclass(frozen=True, slots=True)
class FeedState:
    """The three feed snapshots a query reads from.

    Each slot is None until its feed has been fetched once. Slots refresh
    independently, so their `fetched_at` values can be far apart.
    """

    vehicles: VehicleSnapshot | None = None
    stops: StopSnapshot | None = None
    schedules: ScheduleSnapshot | None = None

    @property
    def ready(self) -> bool:
        return self.vehicles is not None and self.stops is not None
