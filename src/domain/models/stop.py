from __future__ import annotations

from dataclasses import dataclass

from .geo import GeoPoint

ACTIVE_STATUS = "ATIVA"


@dataclass(frozen=True, slots=True)
class Stop:
    id: str
    name: str
    location: GeoPoint
    status: str = ACTIVE_STATUS
    stop_type: str = "Habitual"
    category: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status == ACTIVE_STATUS
