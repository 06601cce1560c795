from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .geo import GeoPoint


@dataclass(frozen=True, slots=True)
class VehicleObservation:
    """A validated GPS ping from a vehicle in operation.

    Instances are only built by the vehicle feed parser, after the freshness
    and in-operation checks passed.
    """

    device_id: str | None
    line: str
    location: GeoPoint
    observed_at: datetime
    ingested_at: datetime
    speed_kmh: float | None = None
