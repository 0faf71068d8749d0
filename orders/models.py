"""
Purpose: Domain models for the Orders capability.
What it does:
- Defines core data structures:
- Order (id, customer/store references, money fields, delivery coords, payment, timestamps, status)

Defines enums/constants:
- OrderStatus = pending | confirmed | preparing | ready | picked_up | delivered | cancelled
- PaymentMethod = cash | card | wallet
- PaymentStatus = pending | paid | failed | refunded

Rule: No persistence, no notifications. Models and creation-time invariants only.
State transitions live in dispatch/state_machines/order_state.py.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional
import uuid


class OrderValidationError(ValueError):
    """Raised when an order violates a creation-time invariant."""
    pass


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    PICKED_UP = "picked_up"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    WALLET = "wallet"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _money(name: str, value: Any) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise OrderValidationError(f"{name} must be a number, got {value!r}")
    if not amount.is_finite():
        raise OrderValidationError(f"{name} must be finite")
    if amount < 0:
        raise OrderValidationError(f"{name} must be >= 0")
    return amount.quantize(Decimal("0.01"))


@dataclass
class Order:
    """
    Represents a single customer order.

    Owned by the order-management side; the dispatch core only reads the id,
    the store metadata and the total at creation time.
    """

    id: str
    customer_id: str
    store_id: str

    subtotal: Decimal
    delivery_fee: Decimal
    discount: Decimal
    total: Decimal

    delivery_latitude: float
    delivery_longitude: float

    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_status: PaymentStatus = PaymentStatus.PENDING

    status: OrderStatus = OrderStatus.PENDING

    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @staticmethod
    def new(
        customer_id: str,
        store_id: str,
        subtotal: Any,
        delivery_fee: Any,
        delivery_latitude: float,
        delivery_longitude: float,
        discount: Any = 0,
        payment_method: str | PaymentMethod = PaymentMethod.CASH,
        order_id: Optional[str] = None,
    ) -> Order:
        """
        Creates a pending order and enforces the creation invariants:
        non-negative money, total == subtotal + delivery_fee - discount,
        and delivery coordinates within range.
        """
        subtotal_d = _money("subtotal", subtotal)
        fee_d = _money("delivery_fee", delivery_fee)
        discount_d = _money("discount", discount)

        total = subtotal_d + fee_d - discount_d
        if total < 0:
            raise OrderValidationError("discount cannot exceed subtotal + delivery_fee")

        if not -90.0 <= float(delivery_latitude) <= 90.0:
            raise OrderValidationError("delivery_latitude must be within [-90, 90]")
        if not -180.0 <= float(delivery_longitude) <= 180.0:
            raise OrderValidationError("delivery_longitude must be within [-180, 180]")

        if not customer_id or not store_id:
            raise OrderValidationError("customer_id and store_id are required")

        if isinstance(payment_method, str):
            payment_method = PaymentMethod(payment_method)

        now = _utcnow()
        return Order(
            id=order_id or str(uuid.uuid4()),
            customer_id=customer_id,
            store_id=store_id,
            subtotal=subtotal_d,
            delivery_fee=fee_d,
            discount=discount_d,
            total=total,
            delivery_latitude=float(delivery_latitude),
            delivery_longitude=float(delivery_longitude),
            payment_method=payment_method,
            created_at=now,
            updated_at=now,
        )
