from __future__ import annotations

import math
from dataclasses import dataclass

# WGS84
_A = 6378137.0
_E = 0.0818191908426
_E1SQ = 0.00673949674228
_K0 = 0.9996

_FALSE_EASTING_M = 500000.0
_FALSE_NORTHING_SOUTH_M = 10000000.0


@dataclass(frozen=True, slots=True)
class UtmZone:
    number: int = 23
    southern: bool = True

    @property
    def central_meridian_deg(self) -> float:
        return (self.number - 1) * 6 - 180 + 3


# Brasília
ZONE_23S = UtmZone(number=23, southern=True)


def utm_to_geographic(
    easting: float, northing: float, *, zone: UtmZone = ZONE_23S
) -> tuple[float, float]:
    """Convert UTM coordinates to (lat, lon) in degrees.

    Inverse transverse Mercator series (footpoint latitude, then correction
    terms up to D**6). Accurate enough for regional bounding-box checks and
    short distances; it never fails, so callers must reject points that fall
    outside the service region.
    """

    x = easting - _FALSE_EASTING_M
    y = northing - _FALSE_NORTHING_SOUTH_M if zone.southern else northing

    e2 = _E**2
    e4 = _E**4
    e6 = _E**6

    m = y / _K0
    mu = m / (_A * (1 - e2 / 4 - 3 * e4 / 64 - 5 * e6 / 256))

    # Footpoint latitude series in e1 (from the first eccentricity).
    e1 = (1 - math.sqrt(1 - e2)) / (1 + math.sqrt(1 - e2))
    phi1 = (
        mu
        + (3 * e1 / 2 - 27 * e1**3 / 32) * math.sin(2 * mu)
        + (21 * e1**2 / 16 - 55 * e1**4 / 32) * math.sin(4 * mu)
        + (151 * e1**3 / 96) * math.sin(6 * mu)
    )

    sin_phi1 = math.sin(phi1)
    nu1 = _A / math.sqrt(1 - e2 * sin_phi1**2)
    r1 = _A * (1 - e2) / (1 - e2 * sin_phi1**2) ** 1.5

    t1 = math.tan(phi1) ** 2
    c1 = _E1SQ * math.cos(phi1) ** 2
    d = x / (nu1 * _K0)

    lat = phi1 - (nu1 * math.tan(phi1) / r1) * (
        d**2 / 2
        - (5 + 3 * t1 + 10 * c1 - 4 * c1**2 - 9 * _E1SQ) * d**4 / 24
        + (61 + 90 * t1 + 298 * c1 + 45 * t1**2 - 252 * _E1SQ - 3 * c1**2)
        * d**6
        / 720
    )

    lon_offset = (
        d
        - (1 + 2 * t1 + c1) * d**3 / 6
        + (5 - 2 * c1 + 28 * t1 - 3 * c1**2 + 8 * _E1SQ + 24 * t1**2) * d**5 / 120
    ) / math.cos(phi1)

    return math.degrees(lat), zone.central_meridian_deg + math.degrees(lon_offset)
