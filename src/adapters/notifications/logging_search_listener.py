from __future__ import annotations

import logging
from dataclasses import dataclass

from src.app.ports.output import ISearchListener
from src.domain.models import SearchResult, SearchStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LoggingSearchListener(ISearchListener):
    """Writes automatic re-query outcomes to the log.

    Stand-in for a push channel; clients poll `/riders/{id}/latest`.
    """

    max_lines: int = 3

    async def on_result(self, rider_id: str, result: SearchResult) -> None:
        if result.status is not SearchStatus.OK:
            logger.info("Rider %s update: %s", rider_id, result.status.value)
            return
        lines = ", ".join(r.summary for r in result.rows[: self.max_lines])
        logger.info("Rider %s update: %s", rider_id, lines)

    async def on_finished(self, rider_id: str) -> None:
        logger.info("Rider %s: automatic updates ended", rider_id)
