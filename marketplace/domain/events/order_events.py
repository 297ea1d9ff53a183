from dataclasses import dataclass
from decimal import Decimal

from .base import DomainEvent


@dataclass
class OrderPlacedEvent(DomainEvent):
    """Event: Order placed."""

    def __init__(self, order_id: str, buyer_id: str, seller_id: str, product_id: str, total_amount: Decimal):
        super().__init__(
            event_type="order.placed",
            payload={
                "order_id": order_id,
                "buyer_id": buyer_id,
                "seller_id": seller_id,
                "product_id": product_id,
                "total_amount": str(total_amount),
            },
        )


@dataclass
class OrderStatusChangedEvent(DomainEvent):
    """Event: Order moved along its fulfillment lifecycle."""

    def __init__(self, order_id: str, user_id: str, from_status: str, to_status: str):
        super().__init__(
            event_type="order.status_changed",
            payload={
                "order_id": order_id,
                "user_id": user_id,
                "from_status": from_status,
                "to_status": to_status,
            },
        )


@dataclass
class OrderCancelledEvent(DomainEvent):
    """Event: Order cancelled by its buyer."""

    def __init__(self, order_id: str, user_id: str, reason: str, quantity_restored: int):
        super().__init__(
            event_type="order.cancelled",
            payload={
                "order_id": order_id,
                "user_id": user_id,
                "reason": reason,
                "quantity_restored": quantity_restored,
            },
        )
