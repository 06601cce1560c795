from __future__ import annotations

from src.domain.algorithms.geo_utils import haversine_distance_m, round_half_up
from src.domain.models import (
    ArrivalEstimate,
    ArrivalFactors,
    Confidence,
    GeoPoint,
    SpeedCap,
    SpeedSource,
)

DEFAULT_SPEED_KMH = 15.0
ACCELERATION_FACTOR = 1.2

NEAR_DISTANCE_M = 500.0
NEAR_SPEED_CAP_KMH = 12.0
FAR_DISTANCE_M = 2000.0
FAR_SPEED_CAP_KMH = 25.0
LOW_CONFIDENCE_DISTANCE_M = 3000.0


def estimate_arrival(
    reference: GeoPoint,
    vehicle: GeoPoint,
    *,
    speed_kmh: float | None,
    traffic_factor: float,
    default_speed_kmh: float = DEFAULT_SPEED_KMH,
    acceleration_factor: float = ACCELERATION_FACTOR,
) -> ArrivalEstimate:
    """Estimate minutes until a vehicle reaches the reference point.

    The reported speed is used when positive, otherwise the default speed.
    Near the reference the speed is capped to model stop-and-go urban
    driving, far away it is capped to a cruising speed. The traffic factor
    divides the speed and the acceleration factor inflates the travel time.
    Minutes are rounded and never below 1.
    """

    distance_m = haversine_distance_m(reference, vehicle)

    if speed_kmh is not None and speed_kmh > 0:
        speed = float(speed_kmh)
        source = SpeedSource.REAL
    else:
        speed = float(default_speed_kmh)
        source = SpeedSource.ESTIMATED

    cap: SpeedCap | None = None
    if distance_m < NEAR_DISTANCE_M:
        speed = min(speed, NEAR_SPEED_CAP_KMH)
        cap = SpeedCap.PROXIMITY
    elif distance_m > FAR_DISTANCE_M:
        speed = min(speed, FAR_SPEED_CAP_KMH)
        cap = SpeedCap.DISTANCE

    speed = speed / traffic_factor

    speed_mps = speed * 1000.0 / 3600.0
    seconds = distance_m / speed_mps * acceleration_factor
    minutes = max(1, round_half_up(seconds / 60.0))

    if source is SpeedSource.REAL and distance_m < FAR_DISTANCE_M:
        confidence = Confidence.HIGH
    elif distance_m > LOW_CONFIDENCE_DISTANCE_M or source is SpeedSource.ESTIMATED:
        confidence = Confidence.LOW
    else:
        confidence = Confidence.MEDIUM

    return ArrivalEstimate(
        minutes=minutes,
        confidence=confidence,
        distance_m=distance_m,
        factors=ArrivalFactors(
            speed_source=source,
            speed_cap=cap,
            effective_speed_kmh=speed,
            traffic_factor=traffic_factor,
            acceleration_factor=acceleration_factor,
        ),
    )
