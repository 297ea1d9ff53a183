"""
Service Container Tests
========================

Unit tests for dependency injection container.
"""

from django.test import TestCase

from infrastructure.container import ServiceContainer, container, get_catalog_service, get_order_service
from infrastructure.events import InMemoryEventBus


class ServiceContainerTest(TestCase):
    """Test ServiceContainer implementation."""

    def setUp(self):
        container.reset()

    def tearDown(self):
        container.reset()

    def test_container_is_singleton(self):
        """Test that ServiceContainer is a singleton."""
        self.assertIs(ServiceContainer(), ServiceContainer())
        self.assertIs(ServiceContainer(), container)

    def test_event_bus_uses_configured_backend(self):
        event_bus = container.event_bus()

        self.assertIsInstance(event_bus, InMemoryEventBus)
        self.assertIs(event_bus, container.event_bus())

    def test_order_service_is_wired_with_shared_dependencies(self):
        order_service = get_order_service()

        self.assertIs(order_service, container.order_service())
        self.assertIs(order_service.inventory_service, container.inventory_service())
        self.assertIs(order_service.notification_service, container.notification_service())
        self.assertIs(order_service.event_bus, container.event_bus())
        self.assertIs(get_catalog_service().notification_service, container.notification_service())

    def test_reset_clears_cached_instances(self):
        order_service = container.order_service()
        event_bus = container.event_bus()

        container.reset()

        self.assertIsNot(order_service, container.order_service())
        self.assertIsNot(event_bus, container.event_bus())
