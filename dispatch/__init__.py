#Expose the high-level pipeline pieces:
#Dispatcher orchestrator (the "one call" entry point)
#DispatchResult / DispatchOutcome (what every dispatch returns)
#DispatchLedger (idempotency per order id)

from .result import DispatchOutcome, DispatchResult
from .ledger import DispatchLedger
from .dispatcher import Dispatcher #the main class to call to notify couriers about an order

__all__ = [
    "Dispatcher",
    "DispatchLedger",
    "DispatchOutcome",
    "DispatchResult",
]
