import logging
from typing import Optional

from django.conf import settings

from .event_bus_interface import EventBus
from .memory_event_bus import InMemoryEventBus
from .redis_event_bus import RedisEventBus


logger = logging.getLogger(__name__)


class EventBusFactory:
    """Builds the configured event bus backend."""

    BACKENDS = {
        "redis": RedisEventBus,
        "memory": InMemoryEventBus,
    }

    @classmethod
    def create(cls, backend: Optional[str] = None) -> EventBus:
        if backend is None:
            backend = getattr(settings, "INFRASTRUCTURE", {}).get("EVENT_BUS_BACKEND", "redis")

        backend_class = cls.BACKENDS.get(backend)
        if backend_class is None:
            raise ValueError(f"Unknown event bus backend: {backend}. Available: {', '.join(cls.BACKENDS)}")

        logger.debug(f"Creating event bus backend: {backend}")
        return backend_class()


# Singleton instance
_event_bus_instance = None


def get_event_bus() -> EventBus:
    """Get singleton event bus instance."""
    global _event_bus_instance
    if _event_bus_instance is None:
        _event_bus_instance = EventBusFactory.create()
    return _event_bus_instance


def reset_event_bus() -> None:
    global _event_bus_instance
    _event_bus_instance = None
