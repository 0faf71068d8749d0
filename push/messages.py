"""
Purpose: Push notification payloads.
What it does:
Defines the message shape the push gateway accepts and the builders for the two
notifications this system sends:
- new order available (to couriers)
- order status changed (to the customer)

Messages are created fresh per send and never stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional

NEW_ORDER_TITLE = "🔔 ¡Nuevo Pedido Disponible!"
DEFAULT_STORE_NAME = "Restaurante"
ORDERS_CHANNEL = "orders"

# status -> (emoji, title, body). "{store}" is replaced with the store name.
STATUS_MESSAGES: Dict[str, tuple] = {
    "pending": ("⏳", "Pedido Recibido", "Tu pedido está pendiente de confirmación"),
    "confirmed": ("✅", "Pedido Confirmado", "{store} ha confirmado tu pedido"),
    "preparing": ("👨‍🍳", "Preparando tu pedido", "{store} está preparando tu comida"),
    "ready": ("📦", "Pedido Listo", "Tu pedido está listo para ser recogido por el repartidor"),
    "picked_up": ("🚴", "¡En Camino!", "El repartidor recogió tu pedido y va hacia ti"),
    "delivered": ("🎉", "¡Pedido Entregado!", "¡Disfruta tu comida! No olvides calificarnos ⭐"),
    "cancelled": ("❌", "Pedido Cancelado", "Lo sentimos, tu pedido fue cancelado"),
}


@dataclass(frozen=True)
class PushMessage:
    to: str
    title: str
    body: str
    data: Dict[str, Any] = field(default_factory=dict)
    sound: str = "default"
    priority: str = "high"
    channel_id: str = ORDERS_CHANNEL

    def to_payload(self) -> Dict[str, Any]:
        """Wire format expected by the gateway."""
        return {
            "to": self.to,
            "sound": self.sound,
            "title": self.title,
            "body": self.body,
            "data": dict(self.data),
            "priority": self.priority,
            "channelId": self.channel_id,
        }


def format_total(total: Optional[Any]) -> str:
    if total is None:
        return "0.00"
    try:
        amount = Decimal(str(total))
    except (ArithmeticError, ValueError):
        return "0.00"
    if not amount.is_finite():
        return "0.00"
    return f"{amount:.2f}"


def build_new_order_message(
    push_token: str,
    order_id: str,
    store_name: Optional[str] = None,
    total: Optional[Any] = None,
) -> PushMessage:
    return PushMessage(
        to=push_token,
        title=NEW_ORDER_TITLE,
        body=f"Pedido de {store_name or DEFAULT_STORE_NAME} - S/{format_total(total)} de delivery",
        data={"orderId": order_id, "type": "new_order"},
        priority="high",
    )


def build_order_status_message(
    push_token: str,
    order_id: str,
    status: str,
    store_name: Optional[str] = None,
) -> PushMessage:
    """
    Customer-facing update. Unknown statuses fall back to a generic text.
    """
    store = store_name or "El restaurante"
    emoji, title, body = STATUS_MESSAGES.get(
        status, ("📋", "Actualización de Pedido", f"Tu pedido cambió a: {status}")
    )
    return PushMessage(
        to=push_token,
        title=f"{emoji} {title}",
        body=body.replace("{store}", store),
        data={"orderId": order_id, "type": "order_status", "status": status},
        priority="high",
    )
