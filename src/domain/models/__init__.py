from .estimate import (
    ArrivalEstimate,
    ArrivalFactors,
    Confidence,
    SpeedCap,
    SpeedSource,
    StopsMethod,
    StopsRemaining,
)
from .geo import FEDERAL_DISTRICT, GeoPoint, ServiceRegion
from .query import ALL_LINES, DirectionFilter, RiderQuery
from .realtime import VehicleObservation
from .result import LineResult, SearchMode, SearchResult, SearchStatus
from .schedule import Direction, ScheduledTime, ScheduleEntry
from .snapshot import FeedState, ScheduleSnapshot, StopSnapshot, VehicleSnapshot
from .stop import Stop

__all__ = [
    "ALL_LINES",
    "ArrivalEstimate",
    "ArrivalFactors",
    "Confidence",
    "Direction",
    "DirectionFilter",
    "FEDERAL_DISTRICT",
    "FeedState",
    "GeoPoint",
    "LineResult",
    "RiderQuery",
    "ScheduleEntry",
    "ScheduleSnapshot",
    "ScheduledTime",
    "SearchMode",
    "SearchResult",
    "SearchStatus",
    "ServiceRegion",
    "SpeedCap",
    "SpeedSource",
    "Stop",
    "StopSnapshot",
    "StopsMethod",
    "StopsRemaining",
    "VehicleObservation",
    "VehicleSnapshot",
]
