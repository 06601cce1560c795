from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable

from src.app.ports.output import ITransitFeedProvider
from src.app.services.snapshot_store import SnapshotStore
from src.domain.exceptions import FeedError
from src.domain.models import ScheduleSnapshot, StopSnapshot, VehicleSnapshot

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FeedRefreshService:
    """Keeps the snapshot store fed from the upstream transit feeds.

    Env vars:
      - POSITIONS_REFRESH_S: vehicle positions interval (default 40)
      - STOPS_REFRESH_S: stops interval (default 172800, two days)
      - SCHEDULES_REFRESH_S: schedules interval (default 172800)

    A failed refresh is logged and leaves the previous snapshot in place.
    """

    provider: ITransitFeedProvider
    store: SnapshotStore
    positions_interval_s: float = 40.0
    stops_interval_s: float = 172800.0
    schedules_interval_s: float = 172800.0
    clock: Callable[[], datetime] = field(
        default=lambda: datetime.now(timezone.utc), repr=False
    )

    _tasks: list[asyncio.Task] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        if os.getenv("POSITIONS_REFRESH_S"):
            self.positions_interval_s = float(os.environ["POSITIONS_REFRESH_S"])
        if os.getenv("STOPS_REFRESH_S"):
            self.stops_interval_s = float(os.environ["STOPS_REFRESH_S"])
        if os.getenv("SCHEDULES_REFRESH_S"):
            self.schedules_interval_s = float(os.environ["SCHEDULES_REFRESH_S"])

    async def refresh_vehicles(self) -> bool:
        try:
            vehicles = await self.provider.list_vehicles()
        except FeedError as exc:
            logger.warning("Vehicle positions refresh failed: %s", exc)
            return False
        self.store.replace_vehicles(
            VehicleSnapshot(vehicles=vehicles, fetched_at=self.clock())
        )
        logger.debug("Vehicle positions refreshed: %d vehicles", len(vehicles))
        return True

    async def refresh_stops(self) -> bool:
        try:
            stops = await self.provider.list_stops()
        except FeedError as exc:
            logger.warning("Stops refresh failed: %s", exc)
            return False
        self.store.replace_stops(StopSnapshot(stops=stops, fetched_at=self.clock()))
        logger.info(
            "Stops refreshed: %d stops (%d active)",
            len(stops),
            sum(1 for s in stops if s.is_active),
        )
        return True

    async def refresh_schedules(self) -> bool:
        try:
            entries = await self.provider.list_schedules()
        except FeedError as exc:
            logger.warning("Schedules refresh failed: %s", exc)
            return False
        self.store.replace_schedules(
            ScheduleSnapshot(entries=entries, fetched_at=self.clock())
        )
        logger.info("Schedules refreshed: %d entries", len(entries))
        return True

    async def refresh_all(self) -> None:
        await asyncio.gather(
            self.refresh_vehicles(), self.refresh_stops(), self.refresh_schedules()
        )

    def start(self) -> None:
        """Start one periodic loop per feed on the running event loop."""

        if self._tasks:
            return
        self._tasks = [
            asyncio.create_task(
                _every(self.positions_interval_s, self.refresh_vehicles),
                name="refresh-positions",
            ),
            asyncio.create_task(
                _every(self.stops_interval_s, self.refresh_stops),
                name="refresh-stops",
            ),
            asyncio.create_task(
                _every(self.schedules_interval_s, self.refresh_schedules),
                name="refresh-schedules",
            ),
        ]

    async def stop(self) -> None:
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


async def _every(interval_s: float, refresh: Callable[[], Awaitable[bool]]) -> None:
    # First run is immediate so queries become ready as soon as possible.
    while True:
        try:
            await refresh()
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Unexpected error during feed refresh")
        await asyncio.sleep(interval_s)
