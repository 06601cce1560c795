from __future__ import annotations

import logging
import re
from datetime import datetime, tzinfo
from typing import Any, Iterable, Mapping

from src.app.settings import EstimationSettings
from src.domain.algorithms.utm import utm_to_geographic
from src.domain.algorithms.validators import (
    as_coordinate,
    is_vehicle_data_valid,
    is_vehicle_in_operation,
)
from src.domain.models import Direction, GeoPoint, ScheduleEntry, Stop, VehicleObservation

logger = logging.getLogger(__name__)

_SCHEDULE_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def _properties(feature: Mapping[str, Any]) -> Mapping[str, Any]:
    props = feature.get("properties")
    return props if isinstance(props, Mapping) else {}


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_timestamp(raw: Any, *, default_tz: tzinfo) -> datetime | None:
    """Parse an ISO 8601 timestamp; naive values are read in default_tz."""

    if not isinstance(raw, str) or not raw.strip():
        return None
    value = raw.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=default_tz)
    return dt


def parse_vehicles(
    features: Iterable[Mapping[str, Any]],
    *,
    ingested_at: datetime,
    settings: EstimationSettings,
) -> tuple[VehicleObservation, ...]:
    """Decode vehicle position features, keeping only valid, operating ones."""

    out: list[VehicleObservation] = []
    rejected = 0
    for feature in features:
        props = _properties(feature)

        observed_at = parse_timestamp(
            props.get("datalocal"), default_tz=settings.timezone
        )
        speed = props.get("velocidade")
        speed_kmh = as_coordinate(speed) if speed is not None else None
        if speed is not None and speed_kmh is None:
            rejected += 1
            continue

        lat = props.get("latitude")
        lon = props.get("longitude")
        line = props.get("numerolinha")
        if not is_vehicle_data_valid(
            lat=lat,
            lon=lon,
            observed_at=observed_at,
            speed_kmh=speed_kmh,
            ingested_at=ingested_at,
            region=settings.region,
            max_age=settings.max_data_age,
            max_speed_kmh=settings.max_speed_kmh,
        ) or not is_vehicle_in_operation(line):
            rejected += 1
            continue

        out.append(
            VehicleObservation(
                device_id=_text(props.get("prefixo")) or _text(props.get("imei")),
                line=str(line).strip(),
                location=GeoPoint(lat=float(lat), lon=float(lon)),
                observed_at=observed_at,  # type: ignore[arg-type]
                ingested_at=ingested_at,
                speed_kmh=speed_kmh,
            )
        )

    if rejected:
        logger.debug("Discarded %d vehicle records", rejected)
    return tuple(out)


def _utm_coordinates(geometry: Any) -> tuple[float, float] | None:
    if not isinstance(geometry, Mapping):
        return None
    coords = geometry.get("coordinates")
    # MultiPoint: use the first point.
    if isinstance(coords, (list, tuple)) and coords and isinstance(coords[0], (list, tuple)):
        coords = coords[0]
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        return None
    easting = as_coordinate(coords[0])
    northing = as_coordinate(coords[1])
    if easting is None or northing is None:
        return None
    return easting, northing


def parse_stops(
    features: Iterable[Mapping[str, Any]], *, settings: EstimationSettings
) -> tuple[Stop, ...]:
    """Decode stop features, converting UTM positions to lat/lon.

    Stops without an id, without a position, or whose position falls outside
    the service region are dropped. Inactive stops are kept; the locator
    skips them.
    """

    out: list[Stop] = []
    rejected = 0
    for feature in features:
        props = _properties(feature)
        stop_id = _text(props.get("parada"))
        coords = _utm_coordinates(feature.get("geometry"))
        if stop_id is None or coords is None:
            rejected += 1
            continue

        lat, lon = utm_to_geographic(coords[0], coords[1], zone=settings.utm_zone)
        if not settings.region.contains_coordinates(lat, lon):
            rejected += 1
            continue

        out.append(
            Stop(
                id=stop_id,
                name=_text(props.get("descricao")) or f"Parada {stop_id}",
                location=GeoPoint(lat=lat, lon=lon),
                status=_text(props.get("situacao")) or "",
                stop_type=_text(props.get("tipo")) or "Habitual",
                category=_text(props.get("categoria")),
            )
        )

    if rejected:
        logger.debug("Discarded %d stop records", rejected)
    return tuple(out)


def parse_schedule_time(raw: Any) -> tuple[int, int] | None:
    """Parse 'H:MM' / 'HH:MM'; anything else is rejected, never defaulted."""

    if not isinstance(raw, str):
        return None
    match = _SCHEDULE_TIME_RE.match(raw.strip())
    if match is None:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return hour, minute


def parse_schedules(features: Iterable[Mapping[str, Any]]) -> tuple[ScheduleEntry, ...]:
    out: list[ScheduleEntry] = []
    rejected = 0
    for feature in features:
        props = _properties(feature)
        line = _text(props.get("cd_linha"))
        time = parse_schedule_time(props.get("hr_prevista"))
        try:
            direction = Direction((_text(props.get("sentido")) or "").upper())
        except ValueError:
            direction = None
        if line is None or time is None or direction is None:
            rejected += 1
            continue

        out.append(
            ScheduleEntry(
                line=line,
                direction=direction,
                hour=time[0],
                minute=time[1],
                stop_id=_text(props.get("parada_id")),
            )
        )

    if rejected:
        logger.debug("Discarded %d schedule records", rejected)
    return tuple(out)
