from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .geo import GeoPoint
from .schedule import Direction

ALL_LINES = "ALL"


class DirectionFilter(str, Enum):
    BOTH = "BOTH"
    IDA = "IDA"
    VOLTA = "VOLTA"
    CIRCULAR = "CIRCULAR"

    def matches(self, direction: Direction) -> bool:
        if self is DirectionFilter.BOTH:
            return True
        return _FILTER_DIRECTIONS[self] is direction


_FILTER_DIRECTIONS = {
    DirectionFilter.IDA: Direction.OUTBOUND,
    DirectionFilter.VOLTA: Direction.INBOUND,
    DirectionFilter.CIRCULAR: Direction.CIRCULAR,
}


def normalize_line(line: str | None) -> str:
    return (line or "").strip().upper()


@dataclass(frozen=True, slots=True)
class RiderQuery:
    location: GeoPoint
    direction: DirectionFilter = DirectionFilter.BOTH
    line: str = ALL_LINES

    @property
    def all_lines(self) -> bool:
        return normalize_line(self.line) in {ALL_LINES, "TODAS", ""}

    def accepts_line(self, line: str) -> bool:
        if self.all_lines:
            return True
        return normalize_line(line) == normalize_line(self.line)
