from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.adapters.feeds.semob_parsers import (
    parse_schedule_time,
    parse_schedules,
    parse_stops,
    parse_timestamp,
    parse_vehicles,
)
from src.app.settings import EstimationSettings
from src.domain.models import Direction

SETTINGS = EstimationSettings()
# 12:00 in Brasília (UTC-3).
INGESTED_AT = datetime(2026, 10, 19, 15, 0, tzinfo=timezone.utc)


def _vehicle(**props) -> dict:
    base = {
        "prefixo": "123456",
        "numerolinha": "0.123",
        "datalocal": "2026-10-19T11:58:00",
        "velocidade": 22,
        "latitude": -15.8,
        "longitude": -47.9,
    }
    base.update(props)
    return {"type": "Feature", "geometry": None, "properties": base}


def test_parse_timestamp_reads_naive_values_in_service_timezone() -> None:
    dt = parse_timestamp("2026-10-19T11:58:00", default_tz=SETTINGS.timezone)

    assert dt is not None
    assert dt.astimezone(timezone.utc) == INGESTED_AT - timedelta(minutes=2)


@pytest.mark.parametrize(
    "raw",
    [
        "2026-10-19T11:58:00-0300",
        "2026-10-19T14:58:00.5+0000",
        "2026-10-19T14:58:00.1234Z",
    ],
)
def test_parse_timestamp_accepts_compact_offsets_and_any_fraction(raw) -> None:
    dt = parse_timestamp(raw, default_tz=SETTINGS.timezone)

    assert dt is not None
    assert dt.replace(microsecond=0) == INGESTED_AT - timedelta(minutes=2)


@pytest.mark.parametrize("raw", [None, "", "yesterday", 1234])
def test_parse_timestamp_rejects_garbage(raw) -> None:
    assert parse_timestamp(raw, default_tz=SETTINGS.timezone) is None


def test_parse_vehicles_builds_observations() -> None:
    vehicles = parse_vehicles(
        [_vehicle(numerolinha=" 0.123 ")], ingested_at=INGESTED_AT, settings=SETTINGS
    )

    assert len(vehicles) == 1
    v = vehicles[0]
    assert v.device_id == "123456"
    assert v.line == "0.123"
    assert v.speed_kmh == 22.0
    assert v.location.lat == -15.8
    assert v.ingested_at == INGESTED_AT
    assert v.ingested_at - v.observed_at == timedelta(minutes=2)


def test_parse_vehicles_drops_invalid_records() -> None:
    features = [
        _vehicle(datalocal="2026-10-19T14:40:00Z"),  # 20 minutes old
        _vehicle(numerolinha="  "),
        _vehicle(numerolinha=None),
        _vehicle(latitude=None),
        _vehicle(latitude=-23.5, longitude=-46.6),
        _vehicle(velocidade=75),
        _vehicle(velocidade="fast"),
        _vehicle(datalocal=None),
        {"type": "Feature"},
        _vehicle(prefixo="ok", velocidade=None),
    ]

    vehicles = parse_vehicles(features, ingested_at=INGESTED_AT, settings=SETTINGS)

    assert [v.device_id for v in vehicles] == ["ok"]
    assert vehicles[0].speed_kmh is None


def _stop(parada, coords, **props) -> dict:
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": coords},
        "properties": {"parada": parada, "situacao": "ATIVA", **props},
    }


def test_parse_stops_converts_utm_and_applies_defaults() -> None:
    stops = parse_stops(
        [
            _stop("2001", [192500.0, 8254000.0], descricao="W3 Sul 508", tipo="Abrigo"),
            _stop("2002", [192600.0, 8254100.0], situacao="DESATIVADA"),
        ],
        settings=SETTINGS,
    )

    assert [s.id for s in stops] == ["2001", "2002"]
    first, second = stops
    assert first.name == "W3 Sul 508"
    assert first.stop_type == "Abrigo"
    assert first.is_active
    assert first.location.lat == pytest.approx(-15.77372, abs=2e-5)
    assert first.location.lon == pytest.approx(-47.86982, abs=2e-5)
    assert second.name == "Parada 2002"
    assert second.stop_type == "Habitual"
    assert not second.is_active


def test_parse_stops_accepts_multipoint_geometry() -> None:
    feature = {
        "type": "Feature",
        "geometry": {"type": "MultiPoint", "coordinates": [[192500.0, 8254000.0]]},
        "properties": {"parada": 77, "situacao": "ATIVA"},
    }

    stops = parse_stops([feature], settings=SETTINGS)

    assert [s.id for s in stops] == ["77"]


def test_parse_stops_drops_unusable_records() -> None:
    features = [
        _stop(None, [192500.0, 8254000.0]),
        _stop("1", []),
        _stop("2", ["x", "y"]),
        _stop("3", [500000.0, 10000000.0]),  # equator, outside the region
        {"type": "Feature", "properties": {"parada": "4"}},
    ]

    assert parse_stops(features, settings=SETTINGS) == ()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("7:05", (7, 5)),
        ("07:05", (7, 5)),
        (" 23:59 ", (23, 59)),
        ("0:00", (0, 0)),
        ("24:00", None),
        ("12:60", None),
        ("7:5", None),
        ("123:00", None),
        ("07h05", None),
        ("", None),
        (None, None),
    ],
)
def test_parse_schedule_time(raw, expected) -> None:
    assert parse_schedule_time(raw) == expected


def test_parse_schedules_drops_malformed_entries() -> None:
    def feature(**props) -> dict:
        return {"type": "Feature", "properties": props}

    entries = parse_schedules(
        [
            feature(cd_linha="0.123", sentido="I", hr_prevista="7:05"),
            feature(cd_linha="0.123", sentido="v", hr_prevista="18:30", parada_id="2001"),
            feature(cd_linha="0.123", sentido="X", hr_prevista="7:05"),
            feature(cd_linha="", sentido="I", hr_prevista="7:05"),
            feature(cd_linha="0.123", sentido="I", hr_prevista="25:00"),
        ]
    )

    assert len(entries) == 2
    assert entries[0].direction is Direction.OUTBOUND
    assert entries[0].time_text == "07:05"
    assert entries[0].stop_id is None
    assert entries[1].direction is Direction.INBOUND
    assert entries[1].stop_id == "2001"
