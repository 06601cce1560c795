from __future__ import annotations

import random

from src.domain.algorithms.ranking import best_per_line, is_worth_showing, rank_lines
from src.domain.models import (
    ArrivalEstimate,
    ArrivalFactors,
    Confidence,
    LineResult,
    SpeedSource,
    StopsMethod,
    StopsRemaining,
)


def _row(
    line: str,
    distance_m: float,
    *,
    confidence: Confidence = Confidence.HIGH,
    stops: int | None = None,
    stop_distance_m: int | None = None,
) -> LineResult:
    estimate = ArrivalEstimate(
        minutes=max(1, int(distance_m // 200)),
        confidence=confidence,
        distance_m=distance_m,
        factors=ArrivalFactors(
            speed_source=SpeedSource.REAL,
            speed_cap=None,
            effective_speed_kmh=20.0,
            traffic_factor=1.3,
            acceleration_factor=1.2,
        ),
    )
    remaining = None
    if stop_distance_m is not None:
        remaining = StopsRemaining(
            count=stops,
            confidence=Confidence.MEDIUM if stops is not None else Confidence.LOW,
            method=(
                StopsMethod.DISTANCE_ESTIMATION
                if stops is not None
                else StopsMethod.BUS_NOT_NEAR_STOP
            ),
        )
    return LineResult(
        line=line,
        estimate=estimate,
        vehicle_distance_m=round(distance_m),
        stop_distance_m=stop_distance_m,
        stops_remaining=remaining,
    )


def test_low_confidence_is_kept_only_when_close() -> None:
    assert is_worth_showing(_row("A", 999.0, confidence=Confidence.LOW))
    assert not is_worth_showing(_row("A", 1000.0, confidence=Confidence.LOW))
    assert is_worth_showing(_row("A", 4000.0, confidence=Confidence.MEDIUM))


def test_one_row_per_line_keeps_the_closest_vehicle() -> None:
    rows = [_row("0.123", 900.0), _row("0.123", 300.0), _row("W3", 500.0)]

    best = {r.line: r for r in best_per_line(rows)}

    assert best["0.123"].vehicle_distance_m == 300
    assert best["W3"].vehicle_distance_m == 500


def test_fewest_stops_wins_over_distance_when_counts_are_known() -> None:
    rows = [
        _row("0.123", 300.0, stops=4, stop_distance_m=100),
        _row("0.123", 1500.0, stops=2, stop_distance_m=100),
    ]

    ranked, _ = rank_lines(rows, max_rows=8)

    assert len(ranked) == 1
    assert ranked[0].stops_count == 2


def test_sort_order_known_counts_first_then_distance() -> None:
    rows = [
        _row("C", 200.0, stops=None, stop_distance_m=50),
        _row("B", 1200.0, stops=3, stop_distance_m=300),
        _row("A", 1800.0, stops=3, stop_distance_m=100),
        _row("D", 900.0, stops=1, stop_distance_m=400),
    ]

    ranked, suppressed = rank_lines(rows, max_rows=8)

    assert [r.line for r in ranked] == ["D", "A", "B", "C"]
    assert suppressed == 0


def test_cap_reports_suppressed_lines() -> None:
    rows = [_row(f"L{i:02d}", 100.0 + i * 50) for i in range(12)]

    ranked, suppressed = rank_lines(rows, max_rows=10)

    assert len(ranked) == 10
    assert suppressed == 2
    assert ranked[0].line == "L00"


def test_filtered_rows_are_not_counted_as_suppressed() -> None:
    rows = [
        _row("near", 200.0),
        _row("noise", 2500.0, confidence=Confidence.LOW),
    ]

    ranked, suppressed = rank_lines(rows, max_rows=1)

    assert [r.line for r in ranked] == ["near"]
    assert suppressed == 0


def test_ranking_is_deterministic_regardless_of_input_order() -> None:
    rows = [
        _row("A", 400.0),
        _row("B", 400.0),
        _row("C", 250.0, stops=2, stop_distance_m=80),
        _row("A", 700.0),
        _row("D", 400.0, stops=2, stop_distance_m=80),
    ]
    expected, _ = rank_lines(rows, max_rows=8)

    rng = random.Random(7)
    for _ in range(20):
        shuffled = rows[:]
        rng.shuffle(shuffled)
        ranked, _ = rank_lines(shuffled, max_rows=8)
        assert ranked == expected

    assert [r.line for r in expected] == ["C", "D", "A", "B"]
