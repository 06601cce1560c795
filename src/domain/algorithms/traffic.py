from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class TrafficModel:
    """Static time-of-day / day-of-week traffic multiplier.

    A factor above 1 slows estimates down. Rules are checked in order and the
    first match wins: weekend, peak window, night window, default.
    Windows are whole hours, inclusive; the night window wraps past midnight.
    """

    weekend_factor: float = 1.1
    peak_factor: float = 1.6
    night_factor: float = 0.8
    default_factor: float = 1.3
    peak_windows: tuple[tuple[int, int], ...] = ((7, 9), (17, 19))
    night_window: tuple[int, int] = (22, 6)

    def factor_at(self, now: datetime) -> float:
        if now.weekday() >= 5:
            return self.weekend_factor

        hour = now.hour
        for start, end in self.peak_windows:
            if start <= hour <= end:
                return self.peak_factor

        night_start, night_end = self.night_window
        if hour >= night_start or hour <= night_end:
            return self.night_factor

        return self.default_factor
