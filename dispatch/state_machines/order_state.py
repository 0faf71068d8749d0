"""
Purpose: Order lifecycle rules.
What it does:
Defines which status changes are legal for an order:

pending -> confirmed -> preparing -> ready -> picked_up -> delivered
pending | confirmed | preparing | ready -> cancelled

Once a courier has picked the order up it can no longer be cancelled.
delivered and cancelled are terminal.

Transitions are driven by stores, couriers and admins. The dispatch core only
cares about one edge: a freshly persisted order in `pending` is dispatched once.
"""

from datetime import datetime, timezone
from typing import Dict, FrozenSet, Optional, Set

from orders.models import Order, OrderStatus


class OrderStateException(Exception):
    """Raised when an invalid state transition is attempted."""
    pass


ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.PICKED_UP, OrderStatus.CANCELLED}),
    OrderStatus.PICKED_UP: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES: FrozenSet[OrderStatus] = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)


def _as_status(value) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        raise OrderStateException(f"Unknown order status: {value!r}")


def is_terminal(status) -> bool:
    return _as_status(status) in TERMINAL_STATUSES


def can_transition(current, target) -> bool:
    return _as_status(target) in ALLOWED_TRANSITIONS[_as_status(current)]


def reachable_statuses(start) -> Set[OrderStatus]:
    """
    Every status reachable from `start` through one or more legal transitions.
    """
    seen: Set[OrderStatus] = set()
    frontier = [_as_status(start)]
    while frontier:
        status = frontier.pop()
        for target in ALLOWED_TRANSITIONS[status]:
            if target not in seen:
                seen.add(target)
                frontier.append(target)
    return seen


def transition_order(order: Order, new_status, now: Optional[datetime] = None) -> Order:
    """
    Moves an order to `new_status` and stamps updated_at.
    Raises OrderStateException if the edge is not in ALLOWED_TRANSITIONS.
    """
    target = _as_status(new_status)
    if not can_transition(order.status, target):
        raise OrderStateException(
            f"Cannot transition order {order.id} from {order.status.value} to {target.value}"
        )

    order.status = target
    order.updated_at = now or datetime.now(timezone.utc)
    return order


def cancel_order(order: Order, now: Optional[datetime] = None) -> Order:
    return transition_order(order, OrderStatus.CANCELLED, now=now)


def should_dispatch(order: Order) -> bool:
    """
    Dispatch only makes sense for a newly created order that nobody has confirmed yet.
    """
    return order.status == OrderStatus.PENDING
