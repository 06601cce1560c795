from __future__ import annotations

from datetime import datetime
from typing import Iterable

from src.domain.models import DirectionFilter, ScheduledTime, ScheduleEntry
from src.domain.models.query import normalize_line

MINUTES_PER_DAY = 24 * 60


def next_scheduled_times(
    entries: Iterable[ScheduleEntry],
    *,
    line: str,
    direction: DirectionFilter,
    now: datetime,
    limit: int = 3,
) -> tuple[ScheduledTime, ...]:
    """Upcoming planned times for a line, soonest first.

    A time at or before the current minute is taken as tomorrow's.
    """

    wanted = normalize_line(line)
    current = now.hour * 60 + now.minute

    upcoming: list[ScheduledTime] = []
    for entry in entries:
        if normalize_line(entry.line) != wanted:
            continue
        if not direction.matches(entry.direction):
            continue
        scheduled = entry.minute_of_day
        if scheduled > current:
            delta = scheduled - current
        else:
            delta = MINUTES_PER_DAY - current + scheduled
        upcoming.append(ScheduledTime(time=entry.time_text, minutes_from_now=delta))

    upcoming.sort(key=lambda s: s.minutes_from_now)
    return tuple(upcoming[:limit])
