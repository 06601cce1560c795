from __future__ import annotations

from src.domain.algorithms.stops_remaining import (
    estimate_stops_remaining,
    line_stop_sequence,
    stops_remaining_to,
)
from src.domain.models import (
    Confidence,
    Direction,
    GeoPoint,
    ScheduleEntry,
    Stop,
    StopsMethod,
)

BASE = GeoPoint(lat=-15.8, lon=-47.9)
METERS_PER_DEGREE_LAT = 6371000.0 * 3.141592653589793 / 180.0


def _north(p: GeoPoint, meters: float) -> GeoPoint:
    return GeoPoint(lat=p.lat + meters / METERS_PER_DEGREE_LAT, lon=p.lon)


def _stop(stop_id: str, meters: float) -> Stop:
    return Stop(id=stop_id, name=stop_id, location=_north(BASE, meters))


# Four stops 1 km apart along a north-south avenue.
S1, S2, S3, S4 = (_stop(f"S{i + 1}", i * 1000.0) for i in range(4))
STOPS = (S1, S2, S3, S4)


def test_no_stop_near_target_is_indeterminate() -> None:
    result = estimate_stops_remaining(
        STOPS, vehicle=S1.location, target=_north(BASE, 5000.0)
    )

    assert result.count is None
    assert not result.is_known
    assert result.confidence is Confidence.LOW
    assert result.method is StopsMethod.NO_NEARBY_STOPS


def test_vehicle_away_from_stops_is_indeterminate() -> None:
    result = estimate_stops_remaining(
        STOPS, vehicle=_north(BASE, 500.0), target=S3.location
    )

    assert result.count is None
    assert result.confidence is Confidence.LOW
    assert result.method is StopsMethod.BUS_NOT_NEAR_STOP
    assert result.target_stop == S3


def test_same_nearest_stop_means_bus_has_arrived() -> None:
    result = estimate_stops_remaining(
        STOPS, vehicle=_north(BASE, 2050.0), target=_north(BASE, 1980.0)
    )

    assert result.count == 0
    assert result.confidence is Confidence.HIGH
    assert result.method is StopsMethod.SAME_STOP
    assert result.vehicle_stop == result.target_stop == S3


def test_line_sequence_counts_forward() -> None:
    result = estimate_stops_remaining(
        STOPS, vehicle=S1.location, target=S3.location, line_sequence=STOPS
    )

    assert result.count == 2
    assert result.confidence is Confidence.HIGH
    assert result.method is StopsMethod.LINE_SEQUENCE


def test_line_sequence_wraps_around_for_round_trips() -> None:
    result = estimate_stops_remaining(
        STOPS, vehicle=S4.location, target=S2.location, line_sequence=STOPS
    )

    # S4 -> (back to start) S1 -> S2
    assert result.count == 2
    assert result.method is StopsMethod.LINE_SEQUENCE


def test_sequence_without_both_stops_falls_back_to_distance() -> None:
    result = estimate_stops_remaining(
        STOPS, vehicle=S1.location, target=S3.location, line_sequence=(S1, S2)
    )

    # 2000 m / 400 m per stop
    assert result.count == 5
    assert result.confidence is Confidence.MEDIUM
    assert result.method is StopsMethod.DISTANCE_ESTIMATION


def test_distance_estimate_is_at_least_one_stop() -> None:
    a = _stop("A", 0.0)
    b = _stop("B", 100.0)

    result = estimate_stops_remaining(
        (a, b), vehicle=a.location, target=_north(BASE, 110.0)
    )

    assert result.count == 1
    assert result.method is StopsMethod.DISTANCE_ESTIMATION


def test_line_stop_sequence_uses_schedule_order_and_skips_unknown_stops() -> None:
    inactive = Stop(id="S9", name="S9", location=BASE, status="DESATIVADA")
    stops_by_id = {s.id: s for s in (*STOPS, inactive)}
    schedules = [
        ScheduleEntry(line="0.123", direction=Direction.OUTBOUND, hour=7, minute=0, stop_id="S2"),
        ScheduleEntry(line="0.123", direction=Direction.OUTBOUND, hour=7, minute=5, stop_id="S1"),
        ScheduleEntry(line="0.999", direction=Direction.OUTBOUND, hour=7, minute=5, stop_id="S4"),
        ScheduleEntry(line="0.123", direction=Direction.OUTBOUND, hour=7, minute=9, stop_id="S2"),
        ScheduleEntry(line="0.123", direction=Direction.OUTBOUND, hour=7, minute=9, stop_id="NOPE"),
        ScheduleEntry(line="0.123", direction=Direction.OUTBOUND, hour=7, minute=9, stop_id="S9"),
        ScheduleEntry(line="0.123", direction=Direction.OUTBOUND, hour=7, minute=12),
        ScheduleEntry(line="0.123", direction=Direction.INBOUND, hour=7, minute=20, stop_id="S3"),
    ]

    seq = line_stop_sequence(schedules, stops_by_id, line=" 0.123 ")

    assert [s.id for s in seq] == ["S2", "S1", "S3"]


def test_line_stop_sequence_is_empty_without_stop_linkage() -> None:
    schedules = [
        ScheduleEntry(line="0.123", direction=Direction.OUTBOUND, hour=7, minute=0),
    ]
    assert line_stop_sequence(schedules, {s.id: s for s in STOPS}, line="0.123") == ()


def test_resolved_target_gives_same_answer_as_target_point() -> None:
    for vehicle in (S1.location, _north(BASE, 500.0), S3.location):
        assert stops_remaining_to(
            STOPS, vehicle=vehicle, target_stop=S3
        ) == estimate_stops_remaining(STOPS, vehicle=vehicle, target=S3.location)


def test_unresolved_target_stop_is_indeterminate() -> None:
    result = stops_remaining_to(STOPS, vehicle=S1.location, target_stop=None)

    assert result.count is None
    assert result.method is StopsMethod.NO_NEARBY_STOPS
