import pytest
from src.domain.models.geo import FEDERAL_DISTRICT, GeoPoint


def test_geo_point_accepts_valid_coordinates() -> None:
    p = GeoPoint(lat=-15.7939, lon=-47.8828)
    assert p.lat == -15.7939
    assert p.lon == -47.8828


@pytest.mark.parametrize(
    ("lat", "lon"),
    [
        (-90.0001, 0.0),
        (90.0001, 0.0),
        (0.0, -180.0001),
        (0.0, 180.0001),
    ],
)
def test_geo_point_rejects_out_of_range_coordinates(lat: float, lon: float) -> None:
    with pytest.raises(ValueError):
        GeoPoint(lat=lat, lon=lon)


def test_service_region_bounds_are_inclusive() -> None:
    assert FEDERAL_DISTRICT.contains(GeoPoint(lat=-16.2, lon=-48.3))
    assert FEDERAL_DISTRICT.contains(GeoPoint(lat=-15.3, lon=-47.2))
    assert not FEDERAL_DISTRICT.contains(GeoPoint(lat=-15.29, lon=-47.9))
    assert not FEDERAL_DISTRICT.contains(GeoPoint(lat=-15.8, lon=-47.19))
