from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase

from infrastructure.events import InMemoryEventBus
from marketplace.models import Order, Product
from marketplace.services import ErrorCodes, InventoryService, OrderService, service_err
from marketplace.tests.factories import OrderFactory, ProductFactory, SellerFactory, UserFactory, shipping_address
from notifications.models import Notification
from notifications.services import NotificationService


class OrderServiceTestCase(TestCase):
    def setUp(self):
        self.event_bus = InMemoryEventBus()
        self.inventory_service = InventoryService()
        self.service = OrderService(
            inventory_service=self.inventory_service,
            notification_service=NotificationService(),
            event_bus=self.event_bus,
        )
        self.buyer = UserFactory()
        self.seller = SellerFactory()
        self.product = ProductFactory(
            seller=self.seller, stock_quantity=5, price=Decimal("100.00"), currency="GBP"
        )

    def place(self, quantity=2, **overrides):
        kwargs = {
            "buyer": self.buyer,
            "product_id": self.product.id,
            "quantity": quantity,
            "payment_method": "card",
            "shipping_address": shipping_address(),
            "shipping_method": "express",
        }
        kwargs.update(overrides)
        return self.service.create_order(**kwargs)


class CreateOrderTest(OrderServiceTestCase):
    def test_create_order_snapshots_price_and_reserves_stock(self):
        result = self.place()

        self.assertTrue(result.ok, result.error_detail)
        order = result.value
        self.assertEqual(order.status, "pending")
        self.assertEqual(order.unit_price, Decimal("100.00"))
        self.assertEqual(order.shipping_cost, Decimal("12.99"))
        self.assertEqual(order.total_amount, Decimal("212.99"))
        self.assertEqual(order.currency, "GBP")
        self.assertEqual(order.seller, self.seller)
        self.assertEqual(order.payment_status, "pending")

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 3)

    def test_price_change_does_not_touch_existing_order(self):
        order = self.place().value

        self.product.price = Decimal("150.00")
        self.product.save()

        order.refresh_from_db()
        self.assertEqual(order.unit_price, Decimal("100.00"))
        self.assertEqual(order.total_amount, Decimal("212.99"))

    def test_seller_is_notified(self):
        order = self.place().value

        notification = Notification.objects.get(user=self.seller)
        self.assertEqual(notification.type, "order_created")
        self.assertEqual(notification.title, "New Order Received")
        self.assertEqual(notification.message, f"You have received a new order for {self.product.name}")
        self.assertEqual(notification.related_order, order)
        self.assertEqual(notification.related_product, self.product)
        self.assertFalse(Notification.objects.filter(user=self.buyer).exists())

    def test_order_placed_event_published(self):
        order = self.place().value

        events = self.event_bus.events_of_type("order.placed")
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0]["payload"]["order_id"], str(order.id))
        self.assertEqual(events[0]["payload"]["total_amount"], "212.99")

    def test_insufficient_stock_leaves_everything_untouched(self):
        self.product.stock_quantity = 1
        self.product.save()

        result = self.place(quantity=2)

        self.assertFalse(result.ok)
        self.assertEqual(result.error, ErrorCodes.INSUFFICIENT_STOCK)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 1)
        self.assertEqual(Order.objects.count(), 0)
        self.assertEqual(Notification.objects.count(), 0)

    def test_can_buy_the_last_unit(self):
        self.product.stock_quantity = 2
        self.product.save()

        result = self.place(quantity=2)

        self.assertTrue(result.ok)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 0)

    def test_pending_product_cannot_be_ordered(self):
        self.product.status = "pending"
        self.product.save()

        result = self.place()

        self.assertEqual(result.error, ErrorCodes.PRODUCT_NOT_APPROVED)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 5)

    def test_malformed_product_id(self):
        result = self.place(product_id="not-a-uuid")

        self.assertEqual(result.error, ErrorCodes.PRODUCT_NOT_FOUND)

    def test_default_shipping_method(self):
        result = self.place(quantity=1, shipping_method="standard")

        self.assertEqual(result.value.total_amount, Decimal("105.99"))

    def test_unknown_shipping_method_charged_as_standard(self):
        result = self.place(quantity=1, shipping_method="teleport")

        self.assertEqual(result.value.shipping_cost, Decimal("5.99"))
        self.assertEqual(result.value.shipping_method, "standard")

    def test_failed_order_insert_restores_stock(self):
        with patch("marketplace.ordering.domain.services.order_service.Order.objects.create") as mock_create:
            mock_create.side_effect = RuntimeError("disk full")
            result = self.place()

        self.assertEqual(result.error, ErrorCodes.INTERNAL_ERROR)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 5)

    def test_failure_after_insert_rolls_back_order_and_stock(self):
        with patch.object(OrderService, "_reload", side_effect=RuntimeError("connection lost")):
            result = self.place()

        self.assertEqual(result.error, ErrorCodes.INTERNAL_ERROR)
        self.assertEqual(Order.objects.count(), 0)
        self.assertEqual(Notification.objects.count(), 0)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 5)

    def test_largest_order_at_price_ceiling(self):
        self.product.price = Decimal("100000.00")
        self.product.stock_quantity = 2000
        self.product.save()

        result = self.place(quantity=1000, shipping_method="overnight")

        self.assertTrue(result.ok, result.error_detail)
        self.assertEqual(result.value.total_amount, Decimal("100000024.99"))
        self.assertEqual(Order.objects.get().total_amount, Decimal("100000024.99"))
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 1000)

    def test_quantity_above_order_cap_is_refused(self):
        self.product.price = Decimal("100000.00")
        self.product.stock_quantity = 2000
        self.product.save()

        result = self.place(quantity=1500)

        self.assertEqual(result.error, ErrorCodes.INVALID_QUANTITY)
        self.assertEqual(Order.objects.count(), 0)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 2000)

    def test_listing_rejected_while_order_in_flight(self):
        reserve = self.inventory_service.reserve_stock

        def reject_then_reserve(product_id, quantity):
            Product.objects.filter(id=product_id).update(status=Product.STATUS_REJECTED)
            return reserve(product_id=product_id, quantity=quantity)

        with patch.object(self.inventory_service, "reserve_stock", side_effect=reject_then_reserve):
            result = self.place()

        self.assertEqual(result.error, ErrorCodes.PRODUCT_NOT_APPROVED)
        self.assertEqual(Order.objects.count(), 0)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 5)

    def test_notification_failure_does_not_abort_order(self):
        with patch("notifications.services.Notification.objects.create", side_effect=RuntimeError("boom")):
            result = self.place()

        self.assertTrue(result.ok)
        self.assertEqual(Order.objects.count(), 1)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 3)


class UpdateStatusTest(OrderServiceTestCase):
    def setUp(self):
        super().setUp()
        self.order = OrderFactory(buyer=self.buyer, product=self.product)

    def test_seller_confirms_order(self):
        result = self.service.update_status(self.order.id, self.seller, "confirmed")

        self.assertTrue(result.ok)
        self.assertEqual(result.value.status, "confirmed")
        notification = Notification.objects.get(user=self.buyer)
        self.assertEqual(notification.type, "order_confirmed")
        self.assertEqual(notification.title, "Order Confirmed")
        self.assertEqual(notification.message, "Your order has been confirmed")

    def test_full_fulfilment_path(self):
        for target in ("confirmed", "shipped", "delivered", "refunded"):
            result = self.service.update_status(self.order.id, self.seller, target)
            self.assertTrue(result.ok, result.error_detail)

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, "refunded")
        self.assertEqual(Notification.objects.filter(user=self.buyer).count(), 4)
        self.assertEqual(len(self.event_bus.events_of_type("order.status_changed")), 4)

    def test_shipping_records_tracking(self):
        self.order.status = "confirmed"
        self.order.save()

        result = self.service.update_status(
            self.order.id, self.seller, "shipped", tracking_number="TRK-123456", estimated_delivery="2026-11-01"
        )

        self.assertTrue(result.ok)
        self.assertEqual(result.value.tracking_number, "TRK-123456")
        self.assertEqual(str(result.value.estimated_delivery), "2026-11-01")

    def test_invalid_transition_lists_valid_targets(self):
        self.order.status = "shipped"
        self.order.save()

        result = self.service.update_status(self.order.id, self.seller, "confirmed")

        self.assertEqual(result.error, ErrorCodes.INVALID_TRANSITION)
        self.assertEqual(result.error_data["valid_transitions"], ["delivered"])
        self.assertEqual(
            result.error_detail,
            "Cannot change status from shipped to confirmed. Valid transitions are: delivered",
        )
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, "shipped")

    def test_replaying_a_transition_fails(self):
        self.assertTrue(self.service.update_status(self.order.id, self.seller, "confirmed").ok)

        result = self.service.update_status(self.order.id, self.seller, "confirmed")

        self.assertEqual(result.error, ErrorCodes.INVALID_TRANSITION)
        self.assertEqual(Notification.objects.filter(user=self.buyer).count(), 1)

    def test_terminal_status_reports_no_transitions(self):
        self.order.status = "refunded"
        self.order.save()

        result = self.service.update_status(self.order.id, self.seller, "delivered")

        self.assertEqual(result.error_data["valid_transitions"], [])
        self.assertTrue(result.error_detail.endswith("Valid transitions are: none"))

    def test_unrecognised_current_status(self):
        Order.objects.filter(id=self.order.id).update(status="lost")

        result = self.service.update_status(self.order.id, self.seller, "delivered")

        self.assertEqual(result.error, ErrorCodes.INVALID_CURRENT_STATUS)

    def test_only_the_seller_may_update(self):
        for user in (self.buyer, SellerFactory()):
            result = self.service.update_status(self.order.id, user, "confirmed")
            self.assertEqual(result.error, ErrorCodes.NOT_ORDER_SELLER)

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, "pending")

    def test_seller_cancellation_records_who_and_when(self):
        result = self.service.update_status(self.order.id, self.seller, "cancelled")

        self.assertTrue(result.ok)
        self.assertEqual(result.value.cancelled_by, self.seller)
        self.assertIsNotNone(result.value.cancelled_at)

    def test_missing_order(self):
        result = self.service.update_status("00000000-0000-0000-0000-000000000000", self.seller, "confirmed")

        self.assertEqual(result.error, ErrorCodes.ORDER_NOT_FOUND)


class CancelOrderTest(OrderServiceTestCase):
    def setUp(self):
        super().setUp()
        self.order = self.place(quantity=2).value
        Notification.objects.all().delete()

    def test_buyer_cancels_pending_order_and_stock_is_restored(self):
        result = self.service.cancel_order(self.order.id, self.buyer, "Found it cheaper elsewhere")

        self.assertTrue(result.ok)
        self.assertEqual(result.value.status, "cancelled")
        self.assertEqual(result.value.cancellation_reason, "Found it cheaper elsewhere")
        self.assertEqual(result.value.cancelled_by, self.buyer)
        self.assertIsNotNone(result.value.cancelled_at)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 5)

        notification = Notification.objects.get(user=self.seller)
        self.assertEqual(notification.type, "order_cancelled")
        self.assertEqual(notification.message, "An order has been cancelled by the buyer")

        events = self.event_bus.events_of_type("order.cancelled")
        self.assertEqual(events[0]["payload"]["quantity_restored"], 2)

    def test_confirmed_order_can_still_be_cancelled(self):
        self.service.update_status(self.order.id, self.seller, "confirmed")

        result = self.service.cancel_order(self.order.id, self.buyer, "Changed my mind about it")

        self.assertTrue(result.ok)

    def test_shipped_order_cannot_be_cancelled(self):
        Order.objects.filter(id=self.order.id).update(status="shipped")

        result = self.service.cancel_order(self.order.id, self.buyer, "Too late to cancel this")

        self.assertEqual(result.error, ErrorCodes.ORDER_CANNOT_CANCEL)
        self.assertEqual(result.error_detail, "Cannot cancel order with status: shipped")
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 3)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, "shipped")

    def test_second_cancellation_does_not_restore_stock_twice(self):
        self.assertTrue(self.service.cancel_order(self.order.id, self.buyer, "Ordered by mistake").ok)

        result = self.service.cancel_order(self.order.id, self.buyer, "Ordered by mistake")

        self.assertEqual(result.error, ErrorCodes.ORDER_CANNOT_CANCEL)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 5)

    def test_seller_cannot_use_buyer_cancellation(self):
        result = self.service.cancel_order(self.order.id, self.seller, "Seller trying to cancel")

        self.assertEqual(result.error, ErrorCodes.NOT_ORDER_OWNER)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 3)

    def test_failed_stock_release_rolls_back_cancellation(self):
        with patch.object(
            self.inventory_service, "release_stock", return_value=service_err(ErrorCodes.INTERNAL_ERROR, "db gone")
        ):
            result = self.service.cancel_order(self.order.id, self.buyer, "Found it cheaper elsewhere")

        self.assertEqual(result.error, ErrorCodes.INTERNAL_ERROR)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, "pending")
        self.assertFalse(Notification.objects.exists())


class ReadOrdersTest(OrderServiceTestCase):
    def test_get_order_visible_to_both_parties_only(self):
        order = OrderFactory(buyer=self.buyer, product=self.product)

        self.assertTrue(self.service.get_order(order.id, self.buyer).ok)
        self.assertTrue(self.service.get_order(order.id, self.seller).ok)
        self.assertEqual(self.service.get_order(order.id, UserFactory()).error, ErrorCodes.PERMISSION_DENIED)

    def test_buyer_and_seller_listings(self):
        for _ in range(3):
            OrderFactory(buyer=self.buyer, product=self.product)
        OrderFactory(buyer=self.buyer, product=self.product, status="shipped")
        OrderFactory()

        buyer_result = self.service.list_buyer_orders(self.buyer, page=1, page_size=2)
        self.assertEqual(len(buyer_result.value["orders"]), 2)
        self.assertEqual(
            buyer_result.value["pagination"],
            {
                "current_page": 1,
                "total_pages": 2,
                "total_count": 4,
                "page_size": 2,
                "has_next": True,
                "has_prev": False,
            },
        )

        seller_result = self.service.list_seller_orders(self.seller, status="shipped")
        self.assertEqual(seller_result.value["pagination"]["total_count"], 1)
        self.assertEqual(seller_result.value["orders"][0].status, "shipped")

    def test_page_past_the_end_is_empty(self):
        OrderFactory(buyer=self.buyer, product=self.product)

        result = self.service.list_buyer_orders(self.buyer, page=5)

        self.assertEqual(result.value["orders"], [])
        self.assertEqual(result.value["pagination"]["current_page"], 5)
        self.assertFalse(result.value["pagination"]["has_next"])
