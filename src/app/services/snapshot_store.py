from __future__ import annotations

from dataclasses import dataclass, field, replace

from src.domain.models import (
    FeedState,
    ScheduleSnapshot,
    StopSnapshot,
    VehicleSnapshot,
)


@dataclass(slots=True)
class SnapshotStore:
    """Single-writer / multi-reader cell holding the current feed state.

    Every update builds a new immutable `FeedState` and swaps it in with one
    assignment, so a reader that called `current()` keeps a consistent view
    for the whole query.
    """

    _state: FeedState = field(default_factory=FeedState)

    def current(self) -> FeedState:
        return self._state

    def replace_vehicles(self, snapshot: VehicleSnapshot) -> None:
        self._state = replace(self._state, vehicles=snapshot)

    def replace_stops(self, snapshot: StopSnapshot) -> None:
        self._state = replace(self._state, stops=snapshot)

    def replace_schedules(self, snapshot: ScheduleSnapshot) -> None:
        self._state = replace(self._state, schedules=snapshot)
