from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from django.utils import timezone


@dataclass
class DomainEvent:
    """
    A fact about an order, published once the change that caused it has committed.

    ``payload`` is sent over the event bus as-is and must stay JSON serialisable
    (ids and amounts as strings).
    """

    event_type: str
    occurred_at: datetime = field(default_factory=timezone.now)
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def order_id(self) -> str:
        return self.payload.get("order_id", "")

    def to_dict(self) -> dict:
        return {"event_type": self.event_type, "occurred_at": self.occurred_at.isoformat(), "payload": self.payload}

    def __str__(self):
        return f"{self.event_type} (order {self.order_id})"
