from __future__ import annotations

from functools import lru_cache

from src.adapters.feeds.http_semob_feed_provider import HttpSemobFeedProvider
from src.adapters.notifications.logging_search_listener import LoggingSearchListener
from src.app.services.arrival_search_service import ArrivalSearchService
from src.app.services.feed_refresh_service import FeedRefreshService
from src.app.services.rider_session_service import RiderSessionRegistry
from src.app.services.snapshot_store import SnapshotStore
from src.app.settings import EstimationSettings

# Process-wide singletons shared by every request.


@lru_cache
def get_settings() -> EstimationSettings:
    return EstimationSettings.from_env()


@lru_cache
def get_snapshot_store() -> SnapshotStore:
    return SnapshotStore()


@lru_cache
def get_refresh_service() -> FeedRefreshService:
    provider = HttpSemobFeedProvider(settings=get_settings())
    return FeedRefreshService(provider=provider, store=get_snapshot_store())


@lru_cache
def get_search_service() -> ArrivalSearchService:
    return ArrivalSearchService(store=get_snapshot_store(), settings=get_settings())


@lru_cache
def get_session_registry() -> RiderSessionRegistry:
    return RiderSessionRegistry(
        search_service=get_search_service(), listener=LoggingSearchListener()
    )
