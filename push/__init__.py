#Marks push as a package.
#Re-exports the gateway adapter, message builders and batcher so other modules
#import from push without knowing internal file names.
#No business logic.

from .messages import PushMessage, build_new_order_message, build_order_status_message
from .gateway import PushGatewayClient, PushGatewayError
from .batcher import BatchReport, chunk_messages, send_in_batches

__all__ = [
    "PushMessage",
    "build_new_order_message",
    "build_order_status_message",
    "PushGatewayClient",
    "PushGatewayError",
    "BatchReport",
    "chunk_messages",
    "send_in_batches",
]
