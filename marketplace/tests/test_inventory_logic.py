import uuid

from django.test import TestCase

from marketplace.models import Product
from marketplace.services import ErrorCodes, InventoryService
from marketplace.tests.factories import ProductFactory


class InventoryLogicTest(TestCase):
    def setUp(self):
        self.product = ProductFactory(stock_quantity=5)
        self.service = InventoryService()

    def test_reserve_decrements_stock(self):
        result = self.service.reserve_stock(self.product.id, 2)

        self.assertTrue(result.ok)
        self.assertEqual(result.value["quantity_reserved"], 2)
        self.assertEqual(result.value["new_stock"], 3)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 3)

    def test_reserve_more_than_available(self):
        result = self.service.reserve_stock(self.product.id, 6)

        self.assertEqual(result.error, ErrorCodes.INSUFFICIENT_STOCK)
        self.assertIn("Available: 5, Requested: 6", result.error_detail)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 5)

    def test_repeated_reservations_never_go_negative(self):
        results = [self.service.reserve_stock(self.product.id, 2) for _ in range(3)]

        self.assertEqual([r.ok for r in results], [True, True, False])
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 1)

    def test_reserve_unknown_product(self):
        result = self.service.reserve_stock(uuid.uuid4(), 1)

        self.assertEqual(result.error, ErrorCodes.PRODUCT_NOT_FOUND)

    def test_reserve_refuses_unapproved_listing(self):
        self.product.status = Product.STATUS_REJECTED
        self.product.save()

        result = self.service.reserve_stock(self.product.id, 1)

        self.assertEqual(result.error, ErrorCodes.PRODUCT_NOT_APPROVED)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock_quantity, 5)

    def test_release_restores_stock(self):
        self.service.reserve_stock(self.product.id, 4)

        result = self.service.release_stock(self.product.id, 4, reason="order_cancelled_test")

        self.assertTrue(result.ok)
        self.assertEqual(result.value["old_stock"], 1)
        self.assertEqual(result.value["new_stock"], 5)

    def test_release_rejects_non_positive_quantity(self):
        self.assertEqual(self.service.release_stock(self.product.id, 0).error, ErrorCodes.INVALID_QUANTITY)
