"""
Purpose: Package entry + stable exports.
What it does:

Marks orders as a Python package and re-exports the public API so other modules can do:

from orders import Order, OrderStatus

Should not contain business logic.

Public API:
- Domain models: Order, OrderStatus, PaymentMethod, PaymentStatus
- Errors: OrderValidationError
"""
from .models import Order, OrderStatus, OrderValidationError, PaymentMethod, PaymentStatus

__all__ = ["Order",
           "OrderStatus",
             "OrderValidationError",
               "PaymentMethod",
               "PaymentStatus",
               ]
