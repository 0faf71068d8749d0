from .order_state import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    OrderStateException,
    can_transition,
    cancel_order,
    is_terminal,
    reachable_statuses,
    should_dispatch,
    transition_order,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATUSES",
    "OrderStateException",
    "can_transition",
    "cancel_order",
    "is_terminal",
    "reachable_statuses",
    "should_dispatch",
    "transition_order",
]
