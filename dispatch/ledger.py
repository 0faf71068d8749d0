"""
Purpose: Short-lived "already dispatched" memory keyed by order id.
What it does:
Stops a retried order-creation call from notifying the fleet twice. An order id
is claimed before couriers are read; the claim expires after `ttl_seconds`.

In-process only: each worker process keeps its own ledger.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Dict


class DispatchLedger:
    def __init__(self, ttl_seconds: float = 600, clock: Callable[[], float] = time.monotonic):
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be >= 0")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._expires_at: Dict[str, float] = {}
        self._lock = threading.Lock()

    def _purge(self, now: float) -> None:
        expired = [key for key, expires_at in self._expires_at.items() if expires_at <= now]
        for key in expired:
            del self._expires_at[key]

    def claim(self, order_id: str) -> bool:
        """
        True if this call now owns the dispatch for `order_id`,
        False if a live claim already exists.
        """
        with self._lock:
            now = self._clock()
            self._purge(now)
            if order_id in self._expires_at:
                return False
            self._expires_at[order_id] = now + self.ttl_seconds
            return True

    def release(self, order_id: str) -> None:
        with self._lock:
            self._expires_at.pop(order_id, None)

    def __contains__(self, order_id: str) -> bool:
        with self._lock:
            self._purge(self._clock())
            return order_id in self._expires_at

    def __len__(self) -> int:
        with self._lock:
            self._purge(self._clock())
            return len(self._expires_at)
