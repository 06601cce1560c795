from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import ScheduleEntry, Stop, VehicleObservation


class ITransitFeedProvider(ABC):
    """Port for fetching and decoding the transit authority feeds.

    Implementations return only validated records and raise
    `FeedUnavailable` when a feed cannot be fetched or decoded.
    """

    @abstractmethod
    async def list_vehicles(self) -> tuple[VehicleObservation, ...]:
        raise NotImplementedError

    @abstractmethod
    async def list_stops(self) -> tuple[Stop, ...]:
        raise NotImplementedError

    @abstractmethod
    async def list_schedules(self) -> tuple[ScheduleEntry, ...]:
        raise NotImplementedError
