from abc import ABC, abstractmethod


class EventBus(ABC):
    """Abstract event bus interface."""

    @abstractmethod
    def publish(self, event_type: str, payload: dict):
        """Publish event to bus. Implementations must never raise."""
        pass
