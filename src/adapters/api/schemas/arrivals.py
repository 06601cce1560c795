from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from src.adapters.api.schemas.geo import GeoPointSchema


class SearchRequestSchema(BaseModel):
    location: GeoPointSchema
    direction: Literal["BOTH", "IDA", "VOLTA", "CIRCULAR"] = "BOTH"
    line: str = Field(default="ALL", max_length=32)


class ArrivalFactorsSchema(BaseModel):
    speed_source: Literal["real", "estimated"]
    speed_cap: Literal["proximity", "distance"] | None = None
    effective_speed_kmh: float
    traffic_factor: float
    acceleration_factor: float


class StopRefSchema(BaseModel):
    stop_id: str
    name: str
    location: GeoPointSchema


class StopsRemainingSchema(BaseModel):
    count: int | None = None
    confidence: Literal["high", "medium", "low"]
    method: str
    vehicle_stop: StopRefSchema | None = None


class ScheduledTimeSchema(BaseModel):
    time: str
    minutes_from_now: int


class LineResultSchema(BaseModel):
    line: str
    minutes: int
    confidence: Literal["high", "medium", "low"]
    vehicle_distance_m: int
    stop: StopRefSchema | None = None
    stop_distance_m: int | None = None
    stops_remaining: StopsRemainingSchema | None = None
    schedules: list[ScheduledTimeSchema] = []
    factors: ArrivalFactorsSchema
    summary: str


class SearchResponseSchema(BaseModel):
    status: Literal["not_ready", "no_results", "ok"]
    mode: Literal["stops", "direct"] | None = None
    results: list[LineResultSchema] = []
    suppressed_lines: int = 0
    nearby_stops: int = 0
    vehicles_fetched_at: datetime | None = None
    stops_fetched_at: datetime | None = None
    schedules_fetched_at: datetime | None = None


class FeedStatusSchema(BaseModel):
    loaded: bool
    records: int = 0
    fetched_at: datetime | None = None


class FeedsStatusSchema(BaseModel):
    ready: bool
    vehicles: FeedStatusSchema
    stops: FeedStatusSchema
    schedules: FeedStatusSchema


class RiderSessionSchema(BaseModel):
    rider_id: str
    auto_refresh_active: bool
    updates_sent: int
    result: SearchResponseSchema | None = None
