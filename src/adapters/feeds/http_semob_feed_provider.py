from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

import httpx

from src.adapters.feeds.semob_parsers import parse_schedules, parse_stops, parse_vehicles
from src.app.ports.output import ITransitFeedProvider
from src.app.settings import EstimationSettings
from src.domain.exceptions import FeedUnavailable
from src.domain.models import ScheduleEntry, Stop, VehicleObservation

_WFS_BASE = (
    "https://geoserver.semob.df.gov.br/geoserver/semob/ows"
    "?service=WFS&version=1.0.0&request=GetFeature&outputFormat=application%2Fjson"
)
DEFAULT_POSITIONS_URL = _WFS_BASE + "&typeName=semob%3AUltima%20Posicao%20Transmitida"
DEFAULT_STOPS_URL = _WFS_BASE + "&typeName=semob%3AParadas%20de%20onibus"
DEFAULT_SCHEDULES_URL = _WFS_BASE + "&typeName=semob%3AHor%C3%A1rios%20das%20Linhas"


@dataclass(slots=True)
class HttpSemobFeedProvider(ITransitFeedProvider):
    """Fetches the SEMOB GeoServer WFS feeds (GeoJSON) over HTTP.

    Env vars:
      - SEMOB_POSITIONS_URL: vehicle positions feed
      - SEMOB_STOPS_URL: bus stops feed
      - SEMOB_SCHEDULES_URL: line schedules feed
      - FEED_TIMEOUT_S: request timeout (default 30)

    Notes:
      - Any transport error, non-2xx status or undecodable body is raised as
        FeedUnavailable; nothing is cached here.
    """

    positions_url: str | None = None
    stops_url: str | None = None
    schedules_url: str | None = None
    timeout_s: float = 30.0
    settings: EstimationSettings = field(default_factory=EstimationSettings)
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)
    clock: Callable[[], datetime] = field(
        default=lambda: datetime.now(timezone.utc), repr=False
    )

    def __post_init__(self) -> None:
        if self.positions_url is None:
            self.positions_url = os.getenv("SEMOB_POSITIONS_URL", DEFAULT_POSITIONS_URL)
        if self.stops_url is None:
            self.stops_url = os.getenv("SEMOB_STOPS_URL", DEFAULT_STOPS_URL)
        if self.schedules_url is None:
            self.schedules_url = os.getenv("SEMOB_SCHEDULES_URL", DEFAULT_SCHEDULES_URL)
        if os.getenv("FEED_TIMEOUT_S"):
            self.timeout_s = float(os.environ["FEED_TIMEOUT_S"])

    async def list_vehicles(self) -> tuple[VehicleObservation, ...]:
        features = await self._get_features(self.positions_url)
        return parse_vehicles(
            features, ingested_at=self.clock(), settings=self.settings
        )

    async def list_stops(self) -> tuple[Stop, ...]:
        features = await self._get_features(self.stops_url)
        return parse_stops(features, settings=self.settings)

    async def list_schedules(self) -> tuple[ScheduleEntry, ...]:
        features = await self._get_features(self.schedules_url)
        return parse_schedules(features)

    async def _get_features(self, url: str | None) -> list[dict[str, Any]]:
        if not url:
            raise FeedUnavailable("Feed URL not configured")

        headers = {
            "accept": "application/json",
            "User-Agent": "Mozilla/5.0 (compatible; BusETA/1.0)",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s, transport=self.transport
            ) as client:
                resp = await client.get(url, headers=headers)
                resp.raise_for_status()
                payload = resp.json()
        except httpx.HTTPStatusError as exc:
            raise FeedUnavailable(
                f"{url} returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise FeedUnavailable(f"{url}: {type(exc).__name__}: {exc}") from exc
        except ValueError as exc:
            raise FeedUnavailable(f"{url}: invalid JSON body") from exc

        if not isinstance(payload, dict):
            raise FeedUnavailable(f"{url}: expected a GeoJSON FeatureCollection")
        features = payload.get("features") or []
        if not isinstance(features, list):
            raise FeedUnavailable(f"{url}: 'features' is not a list")
        return [f for f in features if isinstance(f, dict)]
