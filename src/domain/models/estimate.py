from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .stop import Stop


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class SpeedSource(str, Enum):
    REAL = "real"
    ESTIMATED = "estimated"


class SpeedCap(str, Enum):
    PROXIMITY = "proximity"
    DISTANCE = "distance"


class StopsMethod(str, Enum):
    NO_NEARBY_STOPS = "no_nearby_stops"
    BUS_NOT_NEAR_STOP = "bus_not_near_stop"
    SAME_STOP = "same_stop"
    LINE_SEQUENCE = "line_sequence"
    DISTANCE_ESTIMATION = "distance_estimation"


@dataclass(frozen=True, slots=True)
class ArrivalFactors:
    speed_source: SpeedSource
    speed_cap: SpeedCap | None
    effective_speed_kmh: float
    traffic_factor: float
    acceleration_factor: float


@dataclass(frozen=True, slots=True)
class ArrivalEstimate:
    minutes: int
    confidence: Confidence
    distance_m: float
    factors: ArrivalFactors


@dataclass(frozen=True, slots=True)
class StopsRemaining:
    """Best-effort count of stops between a vehicle and a target stop.

    `count` is None when it cannot be determined; `method` and `confidence`
    say how much the count can be trusted.
    """

    count: int | None
    confidence: Confidence
    method: StopsMethod
    target_stop: Stop | None = None
    vehicle_stop: Stop | None = None

    @property
    def is_known(self) -> bool:
        return self.count is not None
