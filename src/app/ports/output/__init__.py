from .search_listener import ISearchListener
from .transit_feed_provider import ITransitFeedProvider

__all__ = [
    "ISearchListener",
    "ITransitFeedProvider",
]
