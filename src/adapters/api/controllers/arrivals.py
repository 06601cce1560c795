from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from src.adapters.api.dependencies import get_search_service, get_snapshot_store
from src.adapters.api.schemas.arrivals import (
    ArrivalFactorsSchema,
    FeedsStatusSchema,
    FeedStatusSchema,
    LineResultSchema,
    ScheduledTimeSchema,
    SearchResponseSchema,
    StopRefSchema,
    StopsRemainingSchema,
)
from src.adapters.api.schemas.geo import GeoPointSchema
from src.app.services.arrival_search_service import ArrivalSearchService
from src.app.services.snapshot_store import SnapshotStore
from src.domain.exceptions import InvalidQuery
from src.domain.models import (
    DirectionFilter,
    GeoPoint,
    LineResult,
    RiderQuery,
    SearchResult,
    Stop,
)

router = APIRouter(tags=["arrivals"])


def build_query(*, lat: float, lon: float, direction: str, line: str) -> RiderQuery:
    try:
        direction_filter = DirectionFilter(direction.strip().upper())
    except ValueError as exc:
        raise InvalidQuery(f"Unknown direction: {direction}") from exc
    return RiderQuery(
        location=GeoPoint(lat=lat, lon=lon),
        direction=direction_filter,
        line=line.strip() or "ALL",
    )


def _stop_to_schema(stop: Stop) -> StopRefSchema:
    return StopRefSchema(
        stop_id=stop.id,
        name=stop.name,
        location=GeoPointSchema(lat=stop.location.lat, lon=stop.location.lon),
    )


def _row_to_schema(row: LineResult) -> LineResultSchema:
    factors = row.estimate.factors
    remaining = row.stops_remaining
    return LineResultSchema(
        line=row.line,
        minutes=row.estimate.minutes,
        confidence=row.estimate.confidence.value,
        vehicle_distance_m=row.vehicle_distance_m,
        stop=_stop_to_schema(row.stop) if row.stop else None,
        stop_distance_m=row.stop_distance_m,
        stops_remaining=(
            StopsRemainingSchema(
                count=remaining.count,
                confidence=remaining.confidence.value,
                method=remaining.method.value,
                vehicle_stop=(
                    _stop_to_schema(remaining.vehicle_stop)
                    if remaining.vehicle_stop
                    else None
                ),
            )
            if remaining is not None
            else None
        ),
        schedules=[
            ScheduledTimeSchema(time=s.time, minutes_from_now=s.minutes_from_now)
            for s in row.schedules
        ],
        factors=ArrivalFactorsSchema(
            speed_source=factors.speed_source.value,
            speed_cap=factors.speed_cap.value if factors.speed_cap else None,
            effective_speed_kmh=factors.effective_speed_kmh,
            traffic_factor=factors.traffic_factor,
            acceleration_factor=factors.acceleration_factor,
        ),
        summary=row.summary,
    )


def result_to_schema(result: SearchResult) -> SearchResponseSchema:
    return SearchResponseSchema(
        status=result.status.value,
        mode=result.mode.value if result.mode else None,
        results=[_row_to_schema(r) for r in result.rows],
        suppressed_lines=result.suppressed_lines,
        nearby_stops=result.nearby_stops,
        vehicles_fetched_at=result.vehicles_fetched_at,
        stops_fetched_at=result.stops_fetched_at,
        schedules_fetched_at=result.schedules_fetched_at,
    )


@router.get("/arrivals", response_model=SearchResponseSchema)
def search_arrivals(
    lat: float = Query(..., ge=-90.0, le=90.0),
    lon: float = Query(..., ge=-180.0, le=180.0),
    direction: str = Query(default="BOTH"),
    line: str = Query(default="ALL", max_length=32),
    service: ArrivalSearchService = Depends(get_search_service),
) -> SearchResponseSchema:
    try:
        query = build_query(lat=lat, lon=lon, direction=direction, line=line)
    except InvalidQuery as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return result_to_schema(service.search(query))


@router.get("/feeds/status", response_model=FeedsStatusSchema)
def feeds_status(
    store: SnapshotStore = Depends(get_snapshot_store),
) -> FeedsStatusSchema:
    state = store.current()
    return FeedsStatusSchema(
        ready=state.ready,
        vehicles=FeedStatusSchema(
            loaded=state.vehicles is not None,
            records=len(state.vehicles.vehicles) if state.vehicles else 0,
            fetched_at=state.vehicles.fetched_at if state.vehicles else None,
        ),
        stops=FeedStatusSchema(
            loaded=state.stops is not None,
            records=len(state.stops.stops) if state.stops else 0,
            fetched_at=state.stops.fetched_at if state.stops else None,
        ),
        schedules=FeedStatusSchema(
            loaded=state.schedules is not None,
            records=len(state.schedules.entries) if state.schedules else 0,
            fetched_at=state.schedules.fetched_at if state.schedules else None,
        ),
    )
