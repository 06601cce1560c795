from __future__ import annotations

from typing import Iterable

from src.domain.models import Confidence, LineResult

CLOSE_RANGE_M = 1000.0


def is_worth_showing(row: LineResult, *, close_range_m: float = CLOSE_RANGE_M) -> bool:
    """Low-confidence estimates are kept only for vehicles close by."""

    if row.estimate.confidence is not Confidence.LOW:
        return True
    return row.estimate.distance_m < close_range_m


def ranking_key(row: LineResult) -> tuple:
    secondary = (
        row.stop_distance_m
        if row.stop_distance_m is not None
        else row.vehicle_distance_m
    )
    count = row.stops_count
    if count is not None:
        return (0, count, secondary, row.vehicle_distance_m, row.line)
    return (1, row.vehicle_distance_m, secondary, 0, row.line)


def best_per_line(rows: Iterable[LineResult]) -> list[LineResult]:
    best: dict[str, LineResult] = {}
    for row in rows:
        current = best.get(row.line)
        if current is None or ranking_key(row) < ranking_key(current):
            best[row.line] = row
    return list(best.values())


def rank_lines(
    rows: Iterable[LineResult],
    *,
    max_rows: int,
    close_range_m: float = CLOSE_RANGE_M,
) -> tuple[tuple[LineResult, ...], int]:
    """Filter, collapse to one row per line, sort and cap.

    Returns the surfaced rows and the number of lines left out by the cap.
    """

    kept = [r for r in rows if is_worth_showing(r, close_range_m=close_range_m)]
    per_line = best_per_line(kept)
    per_line.sort(key=ranking_key)
    suppressed = max(0, len(per_line) - max_rows)
    return tuple(per_line[:max_rows]), suppressed
