import logging
from collections import deque
from typing import Callable, Deque, Dict, List

from django.utils import timezone

from .event_bus_interface import EventBus


logger = logging.getLogger(__name__)


class InMemoryEventBus(EventBus):
    """
    Event bus that keeps published events in process.

    Used when no broker is configured (tests, local development). Only the
    most recent ``max_events`` messages are kept. Handlers registered with
    ``subscribe`` run synchronously; their failures are logged and never reach
    the publisher.
    """

    DEFAULT_MAX_EVENTS = 1000

    def __init__(self, max_events: int = DEFAULT_MAX_EVENTS):
        self.published: Deque[dict] = deque(maxlen=max_events)
        self._subscribers: Dict[str, List[Callable]] = {}

    def publish(self, event_type: str, payload: dict):
        message = {"event_type": event_type, "occurred_at": timezone.now().isoformat(), "payload": payload}
        self.published.append(message)
        logger.debug(f"Recorded event: {event_type}")

        for handler in self._subscribers.get(event_type, []):
            try:
                handler(message)
            except Exception as e:
                logger.error(f"Handler error for {event_type}: {str(e)}")

    def subscribe(self, event_type: str, handler: Callable):
        self._subscribers.setdefault(event_type, []).append(handler)

    def events_of_type(self, event_type: str) -> List[dict]:
        return [message for message in self.published if message["event_type"] == event_type]

    def clear(self):
        self.published.clear()
