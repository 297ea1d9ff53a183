"""
Dependency Injection Container
================================

Simple service locator for the marketplace services and the event bus.

Usage:
    from infrastructure.container import container

    order_service = container.order_service()
    event_bus = container.event_bus()
"""

import logging
from typing import Optional

from .events import EventBus, get_event_bus, reset_event_bus

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Service container for domain services and infrastructure dependencies.

    Implements lazy initialization and caching of service instances.
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        """Ensure only one instance exists (singleton pattern)."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize container (only once)."""
        if not self._initialized:
            self._event_bus: Optional[EventBus] = None

            # Domain Services
            self._inventory_service = None
            self._catalog_service = None
            self._notification_service = None
            self._order_service = None
            self._review_metrics_service = None
            self._review_service = None
            self._saved_item_service = None

            self._initialized = True
            logger.info("Service container initialized")

    def event_bus(self) -> EventBus:
        """Get the configured event bus (cached)."""
        if self._event_bus is None:
            self._event_bus = get_event_bus()
            logger.debug(f"Created event bus: {type(self._event_bus).__name__}")
        return self._event_bus

    def inventory_service(self):
        """Get InventoryService instance."""
        if self._inventory_service is None:
            from marketplace.services import InventoryService

            self._inventory_service = InventoryService()
            logger.debug("Created InventoryService")
        return self._inventory_service

    def catalog_service(self):
        """Get CatalogService instance."""
        if self._catalog_service is None:
            from marketplace.services import CatalogService

            self._catalog_service = CatalogService(notification_service=self.notification_service())
            logger.debug("Created CatalogService")
        return self._catalog_service

    def notification_service(self):
        """Get NotificationService instance."""
        if self._notification_service is None:
            from notifications.services import NotificationService

            self._notification_service = NotificationService()
            logger.debug("Created NotificationService")
        return self._notification_service

    def order_service(self):
        """Get OrderService instance."""
        if self._order_service is None:
            from marketplace.services import OrderService

            # OrderService depends on InventoryService and NotificationService
            self._order_service = OrderService(
                inventory_service=self.inventory_service(),
                notification_service=self.notification_service(),
                event_bus=self.event_bus(),
            )
            logger.debug("Created OrderService")
        return self._order_service

    def review_metrics_service(self):
        """Get ReviewMetricsService instance."""
        if self._review_metrics_service is None:
            from marketplace.services import ReviewMetricsService

            self._review_metrics_service = ReviewMetricsService()
            logger.debug("Created ReviewMetricsService")
        return self._review_metrics_service

    def review_service(self):
        """Get ReviewService instance."""
        if self._review_service is None:
            from marketplace.services import ReviewService

            self._review_service = ReviewService(review_metrics_service=self.review_metrics_service())
            logger.debug("Created ReviewService")
        return self._review_service

    def saved_item_service(self):
        """Get SavedItemService instance."""
        if self._saved_item_service is None:
            from marketplace.services import SavedItemService

            self._saved_item_service = SavedItemService()
            logger.debug("Created SavedItemService")
        return self._saved_item_service

    def reset(self):
        """
        Reset all cached service instances.

        Useful for testing or when switching between environments.
        """
        self._event_bus = None
        self._inventory_service = None
        self._catalog_service = None
        self._notification_service = None
        self._order_service = None
        self._review_metrics_service = None
        self._review_service = None
        self._saved_item_service = None
        reset_event_bus()
        logger.info("Service container reset")


# Global singleton instance
container = ServiceContainer()


def get_order_service():
    """Get order service from global container."""
    return container.order_service()


def get_catalog_service():
    """Get catalog service from global container."""
    return container.catalog_service()


def get_notification_service():
    """Get notification service from global container."""
    return container.notification_service()
