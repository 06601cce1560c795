from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GeoPoint:
    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not (-90.0 <= self.lat <= 90.0):
            raise ValueError(f"Invalid latitude: {self.lat}")
        if not (-180.0 <= self.lon <= 180.0):
            raise ValueError(f"Invalid longitude: {self.lon}")


@dataclass(frozen=True, slots=True)
class ServiceRegion:
    """Bounding box outside which feed data is considered invalid.

    Bounds are inclusive.
    """

    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def contains(self, point: GeoPoint) -> bool:
        return (
            self.min_lat <= point.lat <= self.max_lat
            and self.min_lon <= point.lon <= self.max_lon
        )

    def contains_coordinates(self, lat: float, lon: float) -> bool:
        return self.min_lat <= lat <= self.max_lat and self.min_lon <= lon <= self.max_lon


# Distrito Federal (Brasília).
FEDERAL_DISTRICT = ServiceRegion(
    min_lat=-16.2, max_lat=-15.3, min_lon=-48.3, max_lon=-47.2
)
