"""
Purpose: Read side of courier availability.
What it does:
A courier source answers one question for the dispatcher:
"which couriers are online and have a push address right now?"

Sources hand back pages lazily through `iter_online_batches(page_size)` so a very
large fleet never has to sit in memory as one list. Every call starts a fresh,
finite pass over the data.

The Django-backed source lives in backend/logistics/sources.py.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List

from .models import CourierAvailability


class CourierSourceError(Exception):
    """Raised when courier availability cannot be read from the data store."""
    pass


class InMemoryCourierSource:
    """
    Serves a fixed list of couriers. Used by tests and the dispatch simulation.
    """
    def __init__(self, couriers: Iterable[CourierAvailability] = ()):
        self._couriers: List[CourierAvailability] = list(couriers)

    def add(self, courier: CourierAvailability) -> None:
        self._couriers.append(courier)

    def iter_online_batches(self, page_size: int = 500) -> Iterator[List[CourierAvailability]]:
        if page_size < 1:
            raise ValueError("page_size must be >= 1")

        online = [courier for courier in self._couriers if courier.is_dispatch_eligible]
        for start in range(0, len(online), page_size):
            yield online[start:start + page_size]
