from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import SearchResult


class ISearchListener(ABC):
    """Port notified with the outcome of automatic re-queries of a rider."""

    @abstractmethod
    async def on_result(self, rider_id: str, result: SearchResult) -> None:
        raise NotImplementedError

    @abstractmethod
    async def on_finished(self, rider_id: str) -> None:
        raise NotImplementedError
