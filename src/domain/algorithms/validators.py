from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Any

from src.domain.models.geo import FEDERAL_DISTRICT, ServiceRegion

MAX_DATA_AGE = timedelta(minutes=15)
MAX_SPEED_KMH = 60.0


def as_coordinate(value: Any) -> float | None:
    """Return value as a finite float, or None if it is not numeric."""

    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def is_vehicle_data_valid(
    *,
    lat: Any,
    lon: Any,
    observed_at: datetime | None,
    speed_kmh: float | None,
    ingested_at: datetime,
    region: ServiceRegion = FEDERAL_DISTRICT,
    max_age: timedelta = MAX_DATA_AGE,
    max_speed_kmh: float = MAX_SPEED_KMH,
) -> bool:
    """Freshness and plausibility check for a raw vehicle record.

    Age is measured as ingestion time minus observation time. An age exactly
    equal to `max_age` and a speed exactly equal to `max_speed_kmh` pass.
    """

    lat_f = as_coordinate(lat)
    lon_f = as_coordinate(lon)
    if lat_f is None or lon_f is None:
        return False

    if not region.contains_coordinates(lat_f, lon_f):
        return False

    if observed_at is None:
        return False

    age = ingested_at - observed_at
    if age < timedelta(0) or age > max_age:
        return False

    if speed_kmh is not None and (speed_kmh < 0 or speed_kmh > max_speed_kmh):
        return False

    return True


def is_vehicle_in_operation(line: Any) -> bool:
    return isinstance(line, str) and bool(line.strip())
