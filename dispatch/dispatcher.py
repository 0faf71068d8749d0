"""
Purpose: Orchestrator / decision pipeline (the "glue").
What it does:
Accepts a freshly created order, finds the couriers who should hear about it,
and fans a push notification out to them through the gateway.

1. stream online couriers that have a push address (courier source)
2. keep the ones near the store (drivers.selection)
3. build one message per courier (push.messages)
4. send in gateway-sized batches (push.batcher)
5. report counts as a DispatchResult

Nothing raised in here escapes `dispatch`. Order creation treats dispatch as
fire and forget; it only ever gets a DispatchResult back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from drivers.policy import DispatchPolicy, default_dispatch_policy
from drivers.selection import (
    count_without_location,
    filter_dispatch_eligible,
    filter_nearby_couriers,
    normalize_coordinates,
)
from orders.models import Order
from push.batcher import send_in_batches
from push.messages import build_new_order_message

from .ledger import DispatchLedger
from .result import DispatchOutcome, DispatchResult
from .state_machines.order_state import should_dispatch

logger = logging.getLogger(__name__)


@dataclass
class _CourierScan:
    total_online: int = 0
    without_location: int = 0
    push_tokens: List[str] = field(default_factory=list)


class Dispatcher:
    """
    Coordinates the new-order notification for one order at a time.
    Holds no per-call state, so one instance can serve concurrent requests.
    """
    def __init__(self, courier_source, gateway, policy: Optional[DispatchPolicy] = None,
                 ledger: Optional[DispatchLedger] = None):
        self.courier_source = courier_source
        self.gateway = gateway
        self.policy = policy or default_dispatch_policy()
        self.policy.validate()
        self.ledger = ledger

    def dispatch(
        self,
        order_id: str,
        store_name: Optional[str] = None,
        store_lat: Any = None,
        store_lng: Any = None,
        order_total: Any = None,
    ) -> DispatchResult:
        """
        Notify nearby online couriers about `order_id`.
        Always returns a DispatchResult, whatever goes wrong underneath.
        """
        if not isinstance(order_id, str) or not order_id.strip():
            return DispatchResult(order_id=str(order_id or ""), outcome=DispatchOutcome.INVALID_REQUEST)
        order_id = order_id.strip()

        try:
            return self._dispatch(order_id, store_name, store_lat, store_lng, order_total)
        except Exception as exc:
            logger.exception("Dispatch for order %s failed", order_id)
            return DispatchResult(order_id=order_id, outcome=DispatchOutcome.FAILED, error=str(exc))

    def dispatch_created_order(
        self,
        order: Order,
        store_name: Optional[str] = None,
        store_lat: Any = None,
        store_lng: Any = None,
    ) -> DispatchResult:
        """
        Entry point for the order-creation flow: only pending orders are dispatched.
        """
        if not should_dispatch(order):
            logger.info("Order %s is %s, not dispatching", order.id, order.status.value)
            return DispatchResult(order_id=order.id, outcome=DispatchOutcome.NOT_PENDING)
        return self.dispatch(order.id, store_name, store_lat, store_lng, order.total)

    # --- Internal pipeline ---

    def _dispatch(self, order_id, store_name, store_lat, store_lng, order_total) -> DispatchResult:
        # 0. Idempotency: one fan-out per order id while the claim is alive.
        if self.ledger is not None and not self.ledger.claim(order_id):
            logger.info("Order %s already dispatched, skipping", order_id)
            return DispatchResult(order_id=order_id, outcome=DispatchOutcome.ALREADY_DISPATCHED)

        store_location = normalize_coordinates(store_lat, store_lng)

        # 1 + 2. Read couriers page by page and geofence each page as it arrives.
        try:
            scan = self._scan_couriers(store_location)
        except Exception as exc:
            logger.exception("Failed to fetch couriers for order %s", order_id)
            self._release(order_id)
            return DispatchResult(order_id=order_id, outcome=DispatchOutcome.COURIER_READ_FAILED, error=str(exc))

        if scan.total_online == 0:
            logger.info("Order %s: no couriers online", order_id)
            self._release(order_id)
            return DispatchResult(order_id=order_id, outcome=DispatchOutcome.NO_COURIERS_ONLINE)

        if not scan.push_tokens:
            logger.info("Order %s: %d couriers online, none nearby", order_id, scan.total_online)
            self._release(order_id)
            return DispatchResult(
                order_id=order_id,
                outcome=DispatchOutcome.NO_ELIGIBLE_NEARBY,
                total_online=scan.total_online,
            )

        # 3. One message per courier.
        messages = [
            build_new_order_message(token, order_id, store_name, order_total)
            for token in scan.push_tokens
        ]

        # 4. Gateway-sized batches, failures isolated per batch.
        report = send_in_batches(
            self.gateway,
            messages,
            batch_size=self.policy.gateway_batch_size,
            max_workers=self.policy.max_workers,
        )

        logger.info(
            "Order %s: notified %d of %d eligible couriers (%d online, %d/%d batches failed)",
            order_id, report.sent, len(messages), scan.total_online, report.failed_batches, report.batches,
        )

        # 5. Report.
        return DispatchResult(
            order_id=order_id,
            outcome=DispatchOutcome.SENT,
            notified=report.sent,
            total_online=scan.total_online,
            eligible=len(messages),
            without_location=scan.without_location,
            batches=report.batches,
            failed_batches=report.failed_batches,
        )

    def _scan_couriers(self, store_location) -> _CourierScan:
        scan = _CourierScan()
        for page in self.courier_source.iter_online_batches(self.policy.courier_page_size):
            online = filter_dispatch_eligible(page)
            scan.total_online += len(online)

            nearby = filter_nearby_couriers(store_location, online, radius_km=self.policy.radius_km)
            scan.without_location += count_without_location(nearby)
            scan.push_tokens.extend(courier.push_token for courier in nearby)
        return scan

    def _release(self, order_id: str) -> None:
        # Nothing was sent, so a later retry is allowed to try again.
        if self.ledger is not None:
            self.ledger.release(order_id)
