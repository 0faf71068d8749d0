"""
Purpose: The value a dispatch call hands back.
What it does:
DispatchResult is the only thing that leaves the dispatcher. Failures are an
outcome, not an exception, so order creation can never be unwound by a dispatch
problem. Callers decide what to do with `is_failure`; there is nothing to
"unwrap".
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DispatchOutcome(str, Enum):
    SENT = "sent"
    NO_COURIERS_ONLINE = "no_couriers_online"
    NO_ELIGIBLE_NEARBY = "no_eligible_nearby"
    ALREADY_DISPATCHED = "already_dispatched"
    NOT_PENDING = "not_pending"
    INVALID_REQUEST = "invalid_request"
    COURIER_READ_FAILED = "courier_read_failed"
    FAILED = "failed"


OUTCOME_MESSAGES = {
    DispatchOutcome.SENT: "Notifications sent",
    DispatchOutcome.NO_COURIERS_ONLINE: "No online drivers available",
    DispatchOutcome.NO_ELIGIBLE_NEARBY: "No drivers with push tokens nearby",
    DispatchOutcome.ALREADY_DISPATCHED: "Order already dispatched",
    DispatchOutcome.NOT_PENDING: "Order is not pending",
    DispatchOutcome.INVALID_REQUEST: "orderId is required",
    DispatchOutcome.COURIER_READ_FAILED: "Failed to fetch drivers",
    DispatchOutcome.FAILED: "Internal server error",
}


@dataclass(frozen=True)
class DispatchResult:
    order_id: str
    outcome: DispatchOutcome

    notified: int = 0
    total_online: int = 0
    eligible: int = 0
    without_location: int = 0

    batches: int = 0
    failed_batches: int = 0

    # Set only for COURIER_READ_FAILED / FAILED, for logs.
    error: Optional[str] = None

    @property
    def message(self) -> str:
        return OUTCOME_MESSAGES[self.outcome]

    @property
    def is_failure(self) -> bool:
        return self.outcome in (DispatchOutcome.COURIER_READ_FAILED, DispatchOutcome.FAILED)
