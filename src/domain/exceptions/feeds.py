class FeedError(Exception):
    """Base exception for upstream feed failures."""


class FeedUnavailable(FeedError):
    """Raised when a feed could not be fetched or decoded."""
