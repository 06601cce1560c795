from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field

from src.app.ports.output import ISearchListener
from src.app.services.arrival_search_service import ArrivalSearchService
from src.domain.models import RiderQuery, SearchResult

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RiderSession:
    """Search state of one rider.

    Owns at most one auto-refresh task; starting a new search cancels the
    running one before scheduling its replacement.
    """

    rider_id: str
    query: RiderQuery | None = None
    latest: SearchResult | None = None
    updates_sent: int = 0
    _task: asyncio.Task | None = field(default=None, init=False, repr=False)

    @property
    def auto_refresh_active(self) -> bool:
        return self._task is not None and not self._task.done()

    def cancel_auto_refresh(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
        self.updates_sent = 0

    def attach(self, task: asyncio.Task) -> None:
        self.cancel_auto_refresh()
        self._task = task


@dataclass(slots=True)
class RiderSessionRegistry:
    """Runs rider searches and their periodic automatic re-queries."""

    search_service: ArrivalSearchService
    listener: ISearchListener | None = None
    refresh_interval_s: float = 60.0
    max_auto_updates: int = 10

    _sessions: dict[str, RiderSession] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        if os.getenv("AUTO_UPDATE_INTERVAL_S"):
            self.refresh_interval_s = float(os.environ["AUTO_UPDATE_INTERVAL_S"])
        if os.getenv("MAX_AUTO_UPDATES"):
            self.max_auto_updates = int(os.environ["MAX_AUTO_UPDATES"])

    def get(self, rider_id: str) -> RiderSession | None:
        return self._sessions.get(rider_id)

    def start(self, rider_id: str, query: RiderQuery) -> SearchResult:
        """Search now and schedule automatic re-queries for the rider.

        Must be called from a running event loop.
        """

        session = self._sessions.get(rider_id)
        if session is None:
            session = RiderSession(rider_id=rider_id)
            self._sessions[rider_id] = session

        session.cancel_auto_refresh()
        session.query = query
        session.latest = self.search_service.search(query)

        session.attach(
            asyncio.create_task(
                self._auto_refresh(session, query), name=f"rider-{rider_id}"
            )
        )
        return session.latest

    def stop(self, rider_id: str) -> bool:
        session = self._sessions.pop(rider_id, None)
        if session is None:
            return False
        session.cancel_auto_refresh()
        return True

    async def shutdown(self) -> None:
        sessions = list(self._sessions.values())
        self._sessions.clear()
        tasks = [s._task for s in sessions if s._task is not None]
        for session in sessions:
            session.cancel_auto_refresh()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _auto_refresh(self, session: RiderSession, query: RiderQuery) -> None:
        while session.updates_sent < self.max_auto_updates:
            await asyncio.sleep(self.refresh_interval_s)
            try:
                result = self.search_service.search(query)
                session.latest = result
                session.updates_sent += 1
                if self.listener is not None:
                    await self.listener.on_result(session.rider_id, result)
            except Exception:
                logger.exception(
                    "Automatic re-query failed for rider %s", session.rider_id
                )

        logger.info(
            "Automatic updates finished for rider %s after %d updates",
            session.rider_id,
            session.updates_sent,
        )
        if self.listener is not None:
            await self.listener.on_finished(session.rider_id)
