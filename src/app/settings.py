from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta, tzinfo
from zoneinfo import ZoneInfo

from src.domain.algorithms.traffic import TrafficModel
from src.domain.algorithms.utm import UtmZone
from src.domain.models import FEDERAL_DISTRICT, ServiceRegion


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_hours(name: str, default: tuple[int, int]) -> tuple[int, int]:
    """Parse an 'H-H' hour window, e.g. '22-6'."""

    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    start, end = raw.split("-", 1)
    return int(start), int(end)


def _env_hour_windows(
    name: str, default: tuple[tuple[int, int], ...]
) -> tuple[tuple[int, int], ...]:
    """Parse ';'-separated hour windows, e.g. '7-9;17-19'."""

    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    windows: list[tuple[int, int]] = []
    for part in raw.split(";"):
        part = part.strip()
        if not part:
            continue
        start, end = part.split("-", 1)
        windows.append((int(start), int(end)))
    return tuple(windows)


@dataclass(frozen=True, slots=True)
class EstimationSettings:
    """Tuning knobs for validation, estimation and ranking.

    Defaults match the SEMOB (Distrito Federal) deployment. `from_env()`
    lets each knob be overridden without code changes.
    """

    max_data_age: timedelta = timedelta(minutes=15)
    max_speed_kmh: float = 60.0
    default_speed_kmh: float = 15.0
    acceleration_factor: float = 1.2
    traffic: TrafficModel = field(default_factory=TrafficModel)

    rider_stop_radius_m: float = 800.0
    max_candidate_stops: int = 3
    vehicle_stop_radius_m: float = 2000.0
    direct_search_radius_m: float = 5000.0
    target_stop_radius_m: float = 500.0
    vehicle_near_stop_radius_m: float = 300.0
    stop_spacing_m: float = 400.0

    close_range_m: float = 1000.0
    max_stop_search_rows: int = 8
    max_direct_search_rows: int = 10
    max_schedules: int = 3

    region: ServiceRegion = FEDERAL_DISTRICT
    utm_zone: UtmZone = field(default_factory=UtmZone)
    timezone: tzinfo = field(default_factory=lambda: ZoneInfo("America/Sao_Paulo"))

    @staticmethod
    def from_env() -> "EstimationSettings":
        base = EstimationSettings()
        traffic = TrafficModel(
            weekend_factor=_env_float(
                "TRAFFIC_WEEKEND_FACTOR", base.traffic.weekend_factor
            ),
            peak_factor=_env_float("TRAFFIC_PEAK_FACTOR", base.traffic.peak_factor),
            night_factor=_env_float("TRAFFIC_NIGHT_FACTOR", base.traffic.night_factor),
            default_factor=_env_float("TRAFFIC_FACTOR", base.traffic.default_factor),
            peak_windows=_env_hour_windows("PEAK_HOURS", base.traffic.peak_windows),
            night_window=_env_hours("NIGHT_HOURS", base.traffic.night_window),
        )
        region = ServiceRegion(
            min_lat=_env_float("REGION_MIN_LAT", base.region.min_lat),
            max_lat=_env_float("REGION_MAX_LAT", base.region.max_lat),
            min_lon=_env_float("REGION_MIN_LON", base.region.min_lon),
            max_lon=_env_float("REGION_MAX_LON", base.region.max_lon),
        )
        hemisphere = (os.getenv("UTM_HEMISPHERE") or "S").strip().upper()
        tz_name = (os.getenv("SERVICE_TIMEZONE") or "").strip()

        return EstimationSettings(
            max_data_age=timedelta(
                minutes=_env_float(
                    "MAX_DATA_AGE_MINUTES", base.max_data_age.total_seconds() / 60
                )
            ),
            max_speed_kmh=_env_float("MAX_SPEED_KMH", base.max_speed_kmh),
            default_speed_kmh=_env_float("DEFAULT_SPEED_KMH", base.default_speed_kmh),
            acceleration_factor=_env_float(
                "ACCELERATION_FACTOR", base.acceleration_factor
            ),
            traffic=traffic,
            rider_stop_radius_m=_env_float(
                "RIDER_STOP_RADIUS_M", base.rider_stop_radius_m
            ),
            max_candidate_stops=_env_int(
                "MAX_CANDIDATE_STOPS", base.max_candidate_stops
            ),
            vehicle_stop_radius_m=_env_float(
                "VEHICLE_STOP_RADIUS_M", base.vehicle_stop_radius_m
            ),
            direct_search_radius_m=_env_float(
                "MAX_SEARCH_RADIUS_M", base.direct_search_radius_m
            ),
            target_stop_radius_m=_env_float(
                "TARGET_STOP_RADIUS_M", base.target_stop_radius_m
            ),
            vehicle_near_stop_radius_m=_env_float(
                "VEHICLE_NEAR_STOP_RADIUS_M", base.vehicle_near_stop_radius_m
            ),
            stop_spacing_m=_env_float("STOP_SPACING_M", base.stop_spacing_m),
            close_range_m=_env_float("CLOSE_RANGE_M", base.close_range_m),
            max_stop_search_rows=_env_int(
                "MAX_STOP_SEARCH_ROWS", base.max_stop_search_rows
            ),
            max_direct_search_rows=_env_int(
                "MAX_DIRECT_SEARCH_ROWS", base.max_direct_search_rows
            ),
            max_schedules=_env_int("MAX_SCHEDULES", base.max_schedules),
            region=region,
            utm_zone=UtmZone(
                number=_env_int("UTM_ZONE", base.utm_zone.number),
                southern=hemisphere != "N",
            ),
            timezone=ZoneInfo(tz_name) if tz_name else base.timezone,
        )
