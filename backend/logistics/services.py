"""
Wiring between Django and the dispatch core.

Views and the order viewset never build a Dispatcher or gateway themselves;
they go through these helpers so settings are read in one place.
"""
import logging
from typing import Optional

from django.conf import settings

from dispatch.dispatcher import Dispatcher
from dispatch.ledger import DispatchLedger
from dispatch.result import DispatchResult
from drivers.policy import DispatchPolicy
from push.gateway import PushGatewayClient
from push.messages import build_order_status_message

from .sources import OrmCourierSource

logger = logging.getLogger(__name__)


def dispatch_policy() -> DispatchPolicy:
    return DispatchPolicy(
        radius_km=settings.DISPATCH_RADIUS_KM,
        gateway_batch_size=settings.PUSH_GATEWAY_BATCH_SIZE,
        gateway_timeout_seconds=settings.PUSH_GATEWAY_TIMEOUT,
        max_workers=settings.DISPATCH_MAX_WORKERS,
        courier_page_size=settings.DISPATCH_COURIER_PAGE_SIZE,
        dedupe_ttl_seconds=settings.DISPATCH_DEDUPE_TTL_SECONDS,
    )


# Shared by every request in this process.
dispatch_ledger = DispatchLedger(ttl_seconds=settings.DISPATCH_DEDUPE_TTL_SECONDS)


def get_gateway() -> PushGatewayClient:
    return PushGatewayClient(
        url=settings.PUSH_GATEWAY_URL,
        timeout=settings.PUSH_GATEWAY_TIMEOUT,
        access_token=settings.PUSH_GATEWAY_ACCESS_TOKEN,
    )


def get_dispatcher() -> Dispatcher:
    return Dispatcher(
        courier_source=OrmCourierSource(),
        gateway=get_gateway(),
        policy=dispatch_policy(),
        ledger=dispatch_ledger,
    )


def notify_new_order(order) -> Optional[DispatchResult]:
    """
    Called once the order row is committed. Never raises: the order is already
    saved and the caller must still get its 201.
    """
    try:
        store = order.store
        result = get_dispatcher().dispatch_created_order(
            order.to_domain(),
            store_name=store.name,
            store_lat=store.lat,
            store_lng=store.lng,
        )
    except Exception:
        logger.exception("Could not start dispatch for order %s", order.pk)
        return None

    if result.is_failure:
        logger.error("New-order dispatch for %s failed: %s", order.pk, result.error)
    return result


def notify_order_status(order, status, store_name=None):
    """
    Push a status update to the customer's device.
    Returns False when the customer has no registered device.
    Gateway errors propagate to the caller.
    """
    token = order.customer_push_token
    if not token:
        return False

    message = build_order_status_message(
        token,
        str(order.pk),
        status,
        store_name or order.store.name,
    )
    get_gateway().send([message])
    return True
