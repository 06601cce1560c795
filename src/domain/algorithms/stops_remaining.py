from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from src.domain.algorithms.geo_utils import haversine_distance_m, round_half_up
from src.domain.algorithms.stop_locator import nearest_stop
from src.domain.models import (
    FEDERAL_DISTRICT,
    Confidence,
    GeoPoint,
    ScheduleEntry,
    ServiceRegion,
    Stop,
    StopsMethod,
    StopsRemaining,
)
from src.domain.models.query import normalize_line

TARGET_STOP_RADIUS_M = 500.0
VEHICLE_STOP_RADIUS_M = 300.0
AVERAGE_STOP_SPACING_M = 400.0


def line_stop_sequence(
    schedules: Iterable[ScheduleEntry],
    stops_by_id: Mapping[str, Stop],
    *,
    line: str,
) -> tuple[Stop, ...]:
    """Ordered stops of a line, taken from schedule-linked stop ids.

    Only schedule feeds carrying a per-stop id produce a sequence; otherwise
    the result is empty. Order is first appearance in the schedule feed.
    """

    wanted = normalize_line(line)
    seen: set[str] = set()
    out: list[Stop] = []
    for entry in schedules:
        if entry.stop_id is None or normalize_line(entry.line) != wanted:
            continue
        if entry.stop_id in seen:
            continue
        seen.add(entry.stop_id)
        stop = stops_by_id.get(entry.stop_id)
        if stop is not None and stop.is_active:
            out.append(stop)
    return tuple(out)


def estimate_stops_remaining(
    stops: Sequence[Stop],
    *,
    vehicle: GeoPoint,
    target: GeoPoint,
    line_sequence: Sequence[Stop] = (),
    region: ServiceRegion = FEDERAL_DISTRICT,
    target_radius_m: float = TARGET_STOP_RADIUS_M,
    vehicle_radius_m: float = VEHICLE_STOP_RADIUS_M,
    stop_spacing_m: float = AVERAGE_STOP_SPACING_M,
) -> StopsRemaining:
    target_nearest = nearest_stop(
        stops, center=target, radius_m=target_radius_m, region=region
    )
    return stops_remaining_to(
        stops,
        vehicle=vehicle,
        target_stop=target_nearest.stop if target_nearest else None,
        line_sequence=line_sequence,
        region=region,
        vehicle_radius_m=vehicle_radius_m,
        stop_spacing_m=stop_spacing_m,
    )


def stops_remaining_to(
    stops: Sequence[Stop],
    *,
    vehicle: GeoPoint,
    target_stop: Stop | None,
    line_sequence: Sequence[Stop] = (),
    region: ServiceRegion = FEDERAL_DISTRICT,
    vehicle_radius_m: float = VEHICLE_STOP_RADIUS_M,
    stop_spacing_m: float = AVERAGE_STOP_SPACING_M,
) -> StopsRemaining:
    """Stops-remaining chain for an already resolved target stop.

    `target_stop` is the stop nearest to the target point, or None when no
    stop is near it. Lets callers resolve it once for many vehicles.
    """

    if target_stop is None:
        return StopsRemaining(
            count=None, confidence=Confidence.LOW, method=StopsMethod.NO_NEARBY_STOPS
        )

    vehicle_nearest = nearest_stop(
        stops, center=vehicle, radius_m=vehicle_radius_m, region=region
    )
    if vehicle_nearest is None:
        return StopsRemaining(
            count=None,
            confidence=Confidence.LOW,
            method=StopsMethod.BUS_NOT_NEAR_STOP,
            target_stop=target_stop,
        )
    vehicle_stop = vehicle_nearest.stop

    if vehicle_stop.id == target_stop.id:
        return StopsRemaining(
            count=0,
            confidence=Confidence.HIGH,
            method=StopsMethod.SAME_STOP,
            target_stop=target_stop,
            vehicle_stop=vehicle_stop,
        )

    if line_sequence:
        ids = [s.id for s in line_sequence]
        if vehicle_stop.id in ids and target_stop.id in ids:
            vehicle_idx = ids.index(vehicle_stop.id)
            target_idx = ids.index(target_stop.id)
            if target_idx > vehicle_idx:
                count = target_idx - vehicle_idx
            else:
                # Circular or round-trip line: go around the sequence.
                count = len(ids) - vehicle_idx + target_idx
            return StopsRemaining(
                count=max(0, count),
                confidence=Confidence.HIGH,
                method=StopsMethod.LINE_SEQUENCE,
                target_stop=target_stop,
                vehicle_stop=vehicle_stop,
            )

    between_m = haversine_distance_m(vehicle_stop.location, target_stop.location)
    return StopsRemaining(
        count=max(1, round_half_up(between_m / stop_spacing_m)),
        confidence=Confidence.MEDIUM,
        method=StopsMethod.DISTANCE_ESTIMATION,
        target_stop=target_stop,
        vehicle_stop=vehicle_stop,
    )
