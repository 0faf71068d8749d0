"""
Drivers (couriers) domain package.

Public API:
- Models: CourierAvailability
- Policy: DispatchPolicy, default_dispatch_policy
- Geo filter: haversine_km, filter_nearby_couriers, filter_dispatch_eligible
- Sources: InMemoryCourierSource, CourierSourceError
"""
from .models import CourierAvailability, LatLon
from .policy import DispatchPolicy, default_dispatch_policy
from .selection import (
    count_without_location,
    filter_dispatch_eligible,
    filter_nearby_couriers,
    haversine_km,
    normalize_coordinates,
)
from .sources import CourierSourceError, InMemoryCourierSource

__all__ = [
    "CourierAvailability",
    "LatLon",
    "DispatchPolicy",
    "default_dispatch_policy",
    "count_without_location",
    "filter_dispatch_eligible",
    "filter_nearby_couriers",
    "haversine_km",
    "normalize_coordinates",
    "CourierSourceError",
    "InMemoryCourierSource",
]
