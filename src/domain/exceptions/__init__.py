from .feeds import FeedError, FeedUnavailable
from .query import InvalidQuery

__all__ = ["FeedError", "FeedUnavailable", "InvalidQuery"]
