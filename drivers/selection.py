"""
Purpose: Eligibility rules and distance math for choosing which couriers hear about an order.
What it does:
Accepts a store location and a pool of couriers, drops couriers who cannot be
notified, and keeps those within the configured great-circle radius of the store.

Pure functions only: no I/O, deterministic for the same inputs.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, List, Optional

from .models import CourierAvailability, LatLon

EARTH_RADIUS_KM = 6371.0
DEFAULT_RADIUS_KM = 10.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance in kilometres between two (lat, lon) points.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def normalize_coordinates(lat: Any, lon: Any) -> Optional[LatLon]:
    """
    Returns (lat, lon) as floats, or None when either value is missing,
    not a number, or out of range. Malformed input never raises.
    """
    if lat is None or lon is None or isinstance(lat, bool) or isinstance(lon, bool):
        return None
    try:
        lat_f, lon_f = float(lat), float(lon)
    except (TypeError, ValueError):
        return None

    if math.isnan(lat_f) or math.isnan(lon_f):
        return None
    if not (-90.0 <= lat_f <= 90.0 and -180.0 <= lon_f <= 180.0):
        return None
    return (lat_f, lon_f)


def filter_dispatch_eligible(couriers: Iterable[CourierAvailability]) -> List[CourierAvailability]:
    """
    Returns only couriers who are online and have a registered push address.
    """
    return [courier for courier in couriers if courier.is_dispatch_eligible]


def filter_nearby_couriers(
    store_location: Optional[LatLon],
    couriers: Iterable[CourierAvailability],
    radius_km: float = DEFAULT_RADIUS_KM,
) -> List[CourierAvailability]:
    """
    Keep couriers within `radius_km` of the store, preserving input order.

    - Unknown store location: no geo filtering, every courier is returned.
    - Unknown courier location: the courier is kept (fail open), whatever the radius.
    """
    couriers = list(couriers)

    store = normalize_coordinates(*store_location) if store_location else None
    if store is None:
        return couriers

    store_lat, store_lon = store
    nearby: List[CourierAvailability] = []

    for courier in couriers:
        location = courier.location
        if location is None:
            nearby.append(courier)
            continue

        if haversine_km(store_lat, store_lon, location[0], location[1]) <= radius_km:
            nearby.append(courier)

    return nearby


def count_without_location(couriers: Iterable[CourierAvailability]) -> int:
    return sum(1 for courier in couriers if courier.location is None)
