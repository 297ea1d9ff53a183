from .base import DomainEvent
from .order_events import OrderCancelledEvent, OrderPlacedEvent, OrderStatusChangedEvent


__all__ = [
    "DomainEvent",
    "OrderCancelledEvent",
    "OrderPlacedEvent",
    "OrderStatusChangedEvent",
]
