from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from src.app.settings import EstimationSettings
from src.app.services.snapshot_store import SnapshotStore
from src.domain.algorithms.arrival import estimate_arrival
from src.domain.algorithms.geo_utils import haversine_distance_m, round_half_up
from src.domain.algorithms.ranking import rank_lines
from src.domain.algorithms.schedules import next_scheduled_times
from src.domain.algorithms.stop_locator import (
    NearbyStop,
    find_nearby_stops,
    nearest_stop,
)
from src.domain.algorithms.stops_remaining import (
    line_stop_sequence,
    stops_remaining_to,
)
from src.domain.models import (
    FeedState,
    LineResult,
    RiderQuery,
    ScheduledTime,
    ScheduleEntry,
    SearchMode,
    SearchResult,
    SearchStatus,
    Stop,
    VehicleObservation,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ArrivalSearchService:
    """Use case: which buses are coming to a rider, how far and how soon.

    - Looks for stops near the rider and evaluates vehicles around the
      closest ones (arrival estimate + stops remaining).
    - Falls back to a direct search around the rider when no stop is near.
    - Always works on the feed state read at the start of the call.
    """

    store: SnapshotStore
    settings: EstimationSettings = field(default_factory=EstimationSettings)
    clock: Callable[[], datetime] = field(
        default=lambda: datetime.now(timezone.utc), repr=False
    )

    def search(self, query: RiderQuery) -> SearchResult:
        state = self.store.current()
        if state.vehicles is None or state.stops is None:
            return SearchResult(status=SearchStatus.NOT_READY)

        now = self.clock().astimezone(self.settings.timezone)
        vehicles = [v for v in state.vehicles.vehicles if query.accepts_line(v.line)]
        stops = state.stops.stops
        nearby = find_nearby_stops(
            stops,
            center=query.location,
            radius_m=self.settings.rider_stop_radius_m,
            region=self.settings.region,
        )
        if not nearby:
            return self._search_direct(state, query, vehicles, now)
        return self._search_stops(state, query, vehicles, stops, nearby, now)

    def _search_stops(
        self,
        state: FeedState,
        query: RiderQuery,
        vehicles: list[VehicleObservation],
        stops: tuple[Stop, ...],
        nearby: list[NearbyStop],
        now: datetime,
    ) -> SearchResult:
        s = self.settings
        traffic_factor = s.traffic.factor_at(now)
        schedules = _schedule_entries(state)
        stops_by_id = {stop.id: stop for stop in stops}
        sequences: dict[str, tuple[Stop, ...]] = {}

        rows: list[LineResult] = []
        for candidate in nearby[: s.max_candidate_stops]:
            stop = candidate.stop
            target_nearest = nearest_stop(
                stops,
                center=stop.location,
                radius_m=s.target_stop_radius_m,
                region=s.region,
            )
            target_stop = target_nearest.stop if target_nearest else None
            for vehicle in vehicles:
                if (
                    haversine_distance_m(stop.location, vehicle.location)
                    > s.vehicle_stop_radius_m
                ):
                    continue
                if vehicle.line not in sequences:
                    sequences[vehicle.line] = line_stop_sequence(
                        schedules, stops_by_id, line=vehicle.line
                    )

                estimate = estimate_arrival(
                    stop.location,
                    vehicle.location,
                    speed_kmh=vehicle.speed_kmh,
                    traffic_factor=traffic_factor,
                    default_speed_kmh=s.default_speed_kmh,
                    acceleration_factor=s.acceleration_factor,
                )
                remaining = stops_remaining_to(
                    stops,
                    vehicle=vehicle.location,
                    target_stop=target_stop,
                    line_sequence=sequences[vehicle.line],
                    region=s.region,
                    vehicle_radius_m=s.vehicle_near_stop_radius_m,
                    stop_spacing_m=s.stop_spacing_m,
                )
                rows.append(
                    LineResult(
                        line=vehicle.line,
                        estimate=estimate,
                        vehicle_distance_m=round_half_up(estimate.distance_m),
                        stop=stop,
                        stop_distance_m=round_half_up(candidate.distance_m),
                        stops_remaining=remaining,
                        schedules=self._schedules_for(
                            schedules, vehicle.line, query, now
                        ),
                    )
                )

        ranked, suppressed = rank_lines(
            rows, max_rows=s.max_stop_search_rows, close_range_m=s.close_range_m
        )
        logger.debug(
            "Stop search: %d stops nearby, %d candidate rows, %d lines ranked",
            len(nearby),
            len(rows),
            len(ranked),
        )
        return self._result(
            state,
            mode=SearchMode.STOPS,
            rows=ranked,
            suppressed=suppressed,
            nearby_stops=len(nearby),
        )

    def _search_direct(
        self,
        state: FeedState,
        query: RiderQuery,
        vehicles: list[VehicleObservation],
        now: datetime,
    ) -> SearchResult:
        s = self.settings
        traffic_factor = s.traffic.factor_at(now)
        schedules = _schedule_entries(state)

        rows: list[LineResult] = []
        for vehicle in vehicles:
            distance_m = haversine_distance_m(query.location, vehicle.location)
            if distance_m > s.direct_search_radius_m:
                continue
            estimate = estimate_arrival(
                query.location,
                vehicle.location,
                speed_kmh=vehicle.speed_kmh,
                traffic_factor=traffic_factor,
                default_speed_kmh=s.default_speed_kmh,
                acceleration_factor=s.acceleration_factor,
            )
            rows.append(
                LineResult(
                    line=vehicle.line,
                    estimate=estimate,
                    vehicle_distance_m=round_half_up(distance_m),
                    schedules=self._schedules_for(schedules, vehicle.line, query, now),
                )
            )

        ranked, suppressed = rank_lines(
            rows, max_rows=s.max_direct_search_rows, close_range_m=s.close_range_m
        )
        return self._result(
            state, mode=SearchMode.DIRECT, rows=ranked, suppressed=suppressed
        )

    def _schedules_for(
        self,
        schedules: tuple[ScheduleEntry, ...],
        line: str,
        query: RiderQuery,
        now: datetime,
    ) -> tuple[ScheduledTime, ...]:
        return next_scheduled_times(
            schedules,
            line=line,
            direction=query.direction,
            now=now,
            limit=self.settings.max_schedules,
        )

    def _result(
        self,
        state: FeedState,
        *,
        mode: SearchMode,
        rows: tuple[LineResult, ...],
        suppressed: int,
        nearby_stops: int = 0,
    ) -> SearchResult:
        return SearchResult(
            status=SearchStatus.OK if rows else SearchStatus.NO_RESULTS,
            mode=mode,
            rows=rows,
            suppressed_lines=suppressed,
            nearby_stops=nearby_stops,
            vehicles_fetched_at=state.vehicles.fetched_at if state.vehicles else None,
            stops_fetched_at=state.stops.fetched_at if state.stops else None,
            schedules_fetched_at=(
                state.schedules.fetched_at if state.schedules else None
            ),
        )


def _schedule_entries(state: FeedState) -> tuple[ScheduleEntry, ...]:
    return state.schedules.entries if state.schedules is not None else ()
