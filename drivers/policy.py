"""
Purpose: Central configuration for courier selection and notification fan-out.
What it does:

Stores all tunable thresholds/caps for finding couriers and pushing offers:

RADIUS_KM = 10
GATEWAY_BATCH_SIZE = 100   (push gateway documented limit)
MAX_WORKERS = 4

Rule: no logic here, only parameters to tune without rewriting code.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class DispatchPolicy:
    """
    Central configuration for new-order dispatch thresholds.
    """

    # --- Geofencing ---
    # Great-circle radius around the store. Couriers without a known
    # location are included regardless of this value.
    radius_km: float = 10.0

    # --- Push gateway ---
    # The gateway rejects requests carrying more than 100 messages.
    gateway_batch_size: int = 100

    # Upper bound on a single gateway call so a stalled gateway cannot hold the request open.
    gateway_timeout_seconds: float = 10.0

    # Batches are independent; 1 means strictly sequential sends.
    max_workers: int = 4

    # --- Courier reads ---
    # Page size for streaming online couriers out of the data store.
    courier_page_size: int = 500

    # --- Idempotency ---
    # How long an order id stays in the "already dispatched" ledger.
    dedupe_ttl_seconds: int = 600

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.radius_km <= 0:
            raise ValueError("radius_km must be > 0")

        if not 1 <= self.gateway_batch_size <= 100:
            raise ValueError("gateway_batch_size must be between 1 and 100")

        if self.gateway_timeout_seconds <= 0:
            raise ValueError("gateway_timeout_seconds must be > 0")

        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")

        if self.courier_page_size < 1:
            raise ValueError("courier_page_size must be >= 1")

        if self.dedupe_ttl_seconds < 0:
            raise ValueError("dedupe_ttl_seconds must be >= 0")


def default_dispatch_policy() -> DispatchPolicy:
    """
    Convenience factory for the default policy.
    """
    p = DispatchPolicy()
    p.validate()
    return p
