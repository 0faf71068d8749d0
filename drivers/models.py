"""
Purpose: Core data models for the drivers (couriers) domain.
What it does:
Defines the point-in-time availability record of a courier as the dispatch core sees it,
without relying on Django ORM constraints.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Tuple

LatLon = Tuple[float, float]


def _to_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


@dataclass(frozen=True)
class CourierAvailability:
    """
    A read-only snapshot of one courier's availability.

    Location and push token are both optional: a courier may be online before
    the app reports a position, or before a device was registered.
    """
    id: str
    is_online: bool
    push_token: Optional[str] = None
    current_latitude: Optional[float] = None
    current_longitude: Optional[float] = None
    last_seen_at: Optional[datetime] = None

    @property
    def location(self) -> Optional[LatLon]:
        """(lat, lon) when both coordinates are present and in range, else None."""
        lat, lon = self.current_latitude, self.current_longitude
        if lat is None or lon is None:
            return None
        if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
            return None
        return (lat, lon)

    @property
    def is_dispatch_eligible(self) -> bool:
        return self.is_online and bool(self.push_token)

    @classmethod
    def new(
        cls,
        courier_id: Any,
        is_online: Any = False,
        push_token: Optional[str] = None,
        lat: Any = None,
        lon: Any = None,
        last_seen_at: datetime | None = None,
    ) -> CourierAvailability:
        # Loose input (CSV rows, ORM values, JSON) is normalized here.
        if isinstance(is_online, str):
            is_online = is_online.strip().lower() in ("1", "true", "yes", "online")

        token = push_token.strip() if isinstance(push_token, str) else None

        return cls(
            id=str(courier_id),
            is_online=bool(is_online),
            push_token=token or None,
            current_latitude=_to_float(lat),
            current_longitude=_to_float(lon),
            last_seen_at=last_seen_at,
        )
