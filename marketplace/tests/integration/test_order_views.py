import uuid
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from marketplace.models import Order
from marketplace.tests.factories import OrderFactory, ProductFactory, SellerFactory, UserFactory
from notifications.models import Notification


SHIPPING_ADDRESS = {
    "street": "12 Market Street",
    "city": "Manchester",
    "state": "Greater Manchester",
    "zip_code": "M1 1AE",
    "country": "United Kingdom",
    "phone": "+44 161 496 0000",
}


class OrderViewIntegrationTest(TestCase):
    def setUp(self):
        container.reset()
        self.client = APIClient()

        self.buyer = UserFactory(username="buyer", email="buyer@example.com")
        self.seller = SellerFactory(username="seller", email="seller@example.com")
        self.product = ProductFactory(
            seller=self.seller, stock_quantity=5, price=Decimal("100.00"), currency="GBP"
        )

    def tearDown(self):
        container.reset()

    def order_payload(self, **overrides):
        payload = {
            "quantity": 2,
            "payment_method": "card",
            "shipping_method": "express",
            "shipping_address": dict(SHIPPING_ADDRESS),
        }
        payload.update(overrides)
        return payload

    def create_url(self, product_id=None):
        return reverse("marketplace:order-create", kwargs={"product_id": product_id or self.product.id})

    def test_create_order_success(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(self.create_url(), self.order_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data["success"])
        data = response.data["data"]
        self.assertEqual(data["status"], "pending")
        self.assertEqual(data["unit_price"], "100.00")
        self.assertEqual(data["shipping_cost"], "12.99")
        self.assertEqual(data["total_amount"], "212.99")
        self.assertEqual(data["currency"], "GBP")
        self.assertEqual(data["valid_transitions"], ["confirmed", "cancelled"])
        self.assertTrue(data["can_cancel"])
        self.assertEqual(data["seller"]["id"], str(self.seller.id))

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 3)
        self.assertEqual(Notification.objects.filter(user=self.seller, type="order_created").count(), 1)

        events = container.event_bus().events_of_type("order.placed")
        self.assertEqual(events[0]["payload"]["order_id"], data["id"])

    def test_create_large_order_at_price_ceiling(self):
        self.product.price = Decimal("100000.00")
        self.product.stock_quantity = 2000
        self.product.save()
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(self.create_url(), self.order_payload(quantity=1000), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["data"]["total_amount"], "100000012.99")

    def test_create_order_quantity_over_cap(self):
        self.product.stock_quantity = 2000
        self.product.save()
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(self.create_url(), self.order_payload(quantity=1001), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("quantity", response.data["errors"])
        self.assertEqual(Order.objects.count(), 0)

    def test_create_order_insufficient_stock(self):
        self.product.stock_quantity = 1
        self.product.save()
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(self.create_url(), self.order_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "insufficient_stock")
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 1)
        self.assertEqual(Order.objects.count(), 0)

    def test_create_order_validation_errors(self):
        self.client.force_authenticate(user=self.buyer)
        address = dict(SHIPPING_ADDRESS)
        del address["phone"]

        cases = [
            self.order_payload(payment_method="bitcoin"),
            self.order_payload(shipping_address=address),
            self.order_payload(quantity=0),
            self.order_payload(notes="x" * 501),
        ]
        for payload in cases:
            response = self.client.post(self.create_url(), payload, format="json")
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertEqual(response.data["error"], "validation_error")

        self.assertEqual(Order.objects.count(), 0)

    def test_create_order_unknown_shipping_method_uses_standard_rate(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(
            self.create_url(), self.order_payload(quantity=1, shipping_method="teleport"), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["data"]["shipping_cost"], "5.99")
        self.assertEqual(response.data["data"]["total_amount"], "105.99")

    def test_create_order_unknown_product(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(self.create_url(uuid.uuid4()), self.order_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "product_not_found")

    def test_create_order_unapproved_product(self):
        self.product.status = "pending"
        self.product.save()
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(self.create_url(), self.order_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "product_not_approved")

    def test_create_order_requires_authentication(self):
        response = self.client.post(self.create_url(), self.order_payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_buyer_orders_are_paginated(self):
        for _ in range(3):
            OrderFactory(buyer=self.buyer, product=self.product)
        OrderFactory(product=self.product)
        self.client.force_authenticate(user=self.buyer)

        response = self.client.get(reverse("marketplace:order-buyer-orders"), {"page_size": 2})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["data"]["orders"]), 2)
        pagination = response.data["data"]["pagination"]
        self.assertEqual(pagination["total_count"], 3)
        self.assertEqual(pagination["total_pages"], 2)
        self.assertTrue(pagination["has_next"])

    def test_seller_orders_require_seller_role(self):
        OrderFactory(buyer=self.buyer, product=self.product, status="confirmed")

        self.client.force_authenticate(user=self.buyer)
        forbidden = self.client.get(reverse("marketplace:order-seller-orders"))
        self.assertEqual(forbidden.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.seller)
        response = self.client.get(reverse("marketplace:order-seller-orders"), {"status": "confirmed"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["pagination"]["total_count"], 1)

    def test_order_detail_access(self):
        order = OrderFactory(buyer=self.buyer, product=self.product)
        url = reverse("marketplace:order-detail", kwargs={"pk": order.id})

        self.client.force_authenticate(user=self.seller)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_200_OK)

        self.client.force_authenticate(user=UserFactory())
        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"], "permission_denied")

        missing = reverse("marketplace:order-detail", kwargs={"pk": uuid.uuid4()})
        self.assertEqual(self.client.get(missing).status_code, status.HTTP_404_NOT_FOUND)


class OrderStatusViewIntegrationTest(TestCase):
    def setUp(self):
        container.reset()
        self.client = APIClient()
        self.buyer = UserFactory()
        self.seller = SellerFactory()
        self.product = ProductFactory(seller=self.seller, stock_quantity=3)
        self.order = OrderFactory(buyer=self.buyer, product=self.product, quantity=2)

    def tearDown(self):
        container.reset()

    def status_url(self):
        return reverse("marketplace:order-update-status", kwargs={"pk": self.order.id})

    def cancel_url(self):
        return reverse("marketplace:order-cancel", kwargs={"pk": self.order.id})

    def test_seller_walks_order_to_delivery(self):
        self.client.force_authenticate(user=self.seller)

        confirmed = self.client.put(self.status_url(), {"status": "confirmed"}, format="json")
        shipped = self.client.put(
            self.status_url(),
            {"status": "shipped", "tracking_number": "TRK-998877", "estimated_delivery": "2026-11-05"},
            format="json",
        )
        delivered = self.client.put(self.status_url(), {"status": "delivered"}, format="json")

        self.assertEqual(confirmed.status_code, status.HTTP_200_OK)
        self.assertEqual(confirmed.data["message"], "Order status updated to confirmed")
        self.assertEqual(shipped.data["data"]["tracking_number"], "TRK-998877")
        self.assertEqual(shipped.data["data"]["valid_transitions"], ["delivered"])
        self.assertFalse(shipped.data["data"]["can_cancel"])
        self.assertEqual(delivered.data["data"]["status"], "delivered")
        self.assertEqual(Notification.objects.filter(user=self.buyer).count(), 3)

    def test_invalid_transition_names_valid_targets(self):
        self.order.status = "shipped"
        self.order.save()
        self.client.force_authenticate(user=self.seller)

        response = self.client.put(self.status_url(), {"status": "confirmed"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "invalid_transition")
        self.assertEqual(response.data["current_status"], "shipped")
        self.assertEqual(response.data["valid_transitions"], ["delivered"])

    def test_replayed_transition_is_rejected(self):
        self.client.force_authenticate(user=self.seller)

        first = self.client.put(self.status_url(), {"status": "confirmed"}, format="json")
        replay = self.client.put(self.status_url(), {"status": "confirmed"}, format="json")

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(replay.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(replay.data["error"], "invalid_transition")

    def test_unknown_status_value(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.put(self.status_url(), {"status": "teleported"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "validation_error")

    def test_buyer_cannot_update_status(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.put(self.status_url(), {"status": "confirmed"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"], "not_order_seller")

    def test_buyer_cancels_and_stock_returns(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.put(self.cancel_url(), {"reason": "  Found a better offer  "}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["message"], "Order cancelled successfully")
        self.assertEqual(response.data["data"]["status"], "cancelled")
        self.assertEqual(response.data["data"]["cancellation_reason"], "Found a better offer")
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 5)
        self.assertTrue(Notification.objects.filter(user=self.seller, type="order_cancelled").exists())

    def test_cancel_reason_length(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.put(self.cancel_url(), {"reason": "nope"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "validation_error")

    def test_late_cancellation_rejected(self):
        self.order.status = "shipped"
        self.order.save()
        self.client.force_authenticate(user=self.buyer)

        response = self.client.put(self.cancel_url(), {"reason": "Changed my mind entirely"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "order_cannot_cancel")
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 3)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, "shipped")

    def test_seller_cannot_use_cancel_endpoint(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.put(self.cancel_url(), {"reason": "Out of stock, sorry"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"], "not_order_owner")
