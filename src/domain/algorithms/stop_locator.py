from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from src.domain.algorithms.geo_utils import haversine_distance_m
from src.domain.models import FEDERAL_DISTRICT, GeoPoint, ServiceRegion, Stop


@dataclass(frozen=True, slots=True)
class NearbyStop:
    stop: Stop
    distance_m: float


def find_nearby_stops(
    stops: Iterable[Stop],
    *,
    center: GeoPoint,
    radius_m: float,
    region: ServiceRegion = FEDERAL_DISTRICT,
) -> list[NearbyStop]:
    """Active stops within radius_m of center, closest first.

    The sort is stable, so stops at the same distance keep snapshot order.
    """

    found: list[NearbyStop] = []
    for stop in stops:
        if not stop.is_active or not region.contains(stop.location):
            continue
        d = haversine_distance_m(center, stop.location)
        if d <= radius_m:
            found.append(NearbyStop(stop=stop, distance_m=d))

    found.sort(key=lambda n: n.distance_m)
    return found


def nearest_stop(
    stops: Iterable[Stop],
    *,
    center: GeoPoint,
    radius_m: float,
    region: ServiceRegion = FEDERAL_DISTRICT,
) -> NearbyStop | None:
    nearby = find_nearby_stops(stops, center=center, radius_m=radius_m, region=region)
    return nearby[0] if nearby else None
