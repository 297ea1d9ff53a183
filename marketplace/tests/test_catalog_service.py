from decimal import Decimal

from django.test import TestCase

from marketplace.models import Product
from marketplace.services import CatalogService, ErrorCodes
from marketplace.tests.factories import (
    AdminFactory,
    OrderFactory,
    PendingProductFactory,
    ProductFactory,
    ProductReviewFactory,
    SellerFactory,
    UserFactory,
)
from notifications.models import Notification
from notifications.services import NotificationService


class CatalogServiceTest(TestCase):
    def setUp(self):
        self.service = CatalogService(notification_service=NotificationService())
        self.seller = SellerFactory()
        self.admin = AdminFactory()

    def test_list_only_shows_approved_products(self):
        approved = ProductFactory(seller=self.seller)
        PendingProductFactory(seller=self.seller)
        ProductFactory(seller=self.seller, status=Product.STATUS_REJECTED)

        result = self.service.list_products()

        self.assertTrue(result.ok)
        self.assertEqual([p.id for p in result.value["products"]], [approved.id])
        self.assertEqual(result.value["pagination"]["total_count"], 1)

    def test_list_filters(self):
        cheap = ProductFactory(name="Oak desk lamp", description="", price=Decimal("15.00"), condition="used")
        ProductFactory(name="Walnut bookshelf", description="", price=Decimal("250.00"), condition="new")

        by_price = self.service.list_products(filters={"max_price": Decimal("20.00")})
        by_search = self.service.list_products(filters={"search": "lamp"})
        by_condition = self.service.list_products(filters={"condition": "used"})

        for result in (by_price, by_search, by_condition):
            self.assertEqual([p.id for p in result.value["products"]], [cheap.id])

    def test_unapproved_product_hidden_from_public(self):
        product = PendingProductFactory(seller=self.seller)

        self.assertEqual(self.service.get_product(product.id).error, ErrorCodes.PRODUCT_NOT_FOUND)
        self.assertEqual(self.service.get_product(product.id, user=UserFactory()).error, ErrorCodes.PRODUCT_NOT_FOUND)
        self.assertTrue(self.service.get_product(product.id, user=self.seller).ok)
        self.assertTrue(self.service.get_product(product.id, user=self.admin).ok)

    def test_get_product_counts_views(self):
        product = ProductFactory()

        self.service.get_product(product.id)
        self.service.get_product(product.id, track_view=False)

        product.refresh_from_db()
        self.assertEqual(product.view_count, 1)

    def test_create_product_starts_pending(self):
        result = self.service.create_product(
            {"name": "Desk lamp", "price": Decimal("24.50"), "stock_quantity": 3, "currency": "gbp"}, self.seller
        )

        self.assertTrue(result.ok)
        self.assertEqual(result.value.status, Product.STATUS_PENDING)
        self.assertEqual(result.value.currency, "GBP")
        self.assertEqual(result.value.seller, self.seller)

    def test_buyers_cannot_create_products(self):
        result = self.service.create_product({"name": "Desk lamp", "price": Decimal("24.50")}, UserFactory())

        self.assertEqual(result.error, ErrorCodes.PERMISSION_DENIED)
        self.assertFalse(Product.objects.exists())

    def test_approve_notifies_seller(self):
        product = PendingProductFactory(seller=self.seller, name="Desk lamp")

        result = self.service.approve_product(product.id, self.admin)

        self.assertTrue(result.ok)
        self.assertEqual(result.value.status, Product.STATUS_APPROVED)
        self.assertEqual(result.value.approved_by, self.admin)
        self.assertIsNotNone(result.value.approved_at)
        notification = Notification.objects.get(user=self.seller)
        self.assertEqual(notification.type, "product_approved")
        self.assertEqual(notification.message, "Your product Desk lamp has been approved and is now live")

    def test_reject_requires_notes(self):
        product = PendingProductFactory(seller=self.seller)

        result = self.service.reject_product(product.id, self.admin, "   ")

        self.assertEqual(result.error, ErrorCodes.VALIDATION_ERROR)
        product.refresh_from_db()
        self.assertEqual(product.status, Product.STATUS_PENDING)

    def test_reject_notifies_seller_with_notes(self):
        product = PendingProductFactory(seller=self.seller, name="Desk lamp")

        result = self.service.reject_product(product.id, self.admin, "Photos are missing")

        self.assertEqual(result.value.status, Product.STATUS_REJECTED)
        self.assertEqual(result.value.admin_notes, "Photos are missing")
        notification = Notification.objects.get(user=self.seller)
        self.assertEqual(notification.type, "product_rejected")
        self.assertEqual(notification.message, "Your product Desk lamp was rejected: Photos are missing")

    def test_pending_queue_and_seller_listing(self):
        PendingProductFactory(seller=self.seller)
        PendingProductFactory()
        ProductFactory(seller=self.seller)

        pending = self.service.list_pending()
        mine = self.service.list_seller_products(self.seller)
        mine_pending = self.service.list_seller_products(self.seller, status=Product.STATUS_PENDING)

        self.assertEqual(pending.value["pagination"]["total_count"], 2)
        self.assertEqual(len(mine.value), 2)
        self.assertEqual(len(mine_pending.value), 1)

    def test_page_past_the_end_is_empty(self):
        ProductFactory.create_batch(3)

        result = self.service.list_products(page=3, page_size=2)

        self.assertTrue(result.ok)
        self.assertEqual(result.value["products"], [])
        self.assertEqual(result.value["pagination"]["total_count"], 3)
        self.assertEqual(result.value["pagination"]["total_pages"], 2)
        self.assertFalse(result.value["pagination"]["has_next"])

    def test_update_sends_listing_back_to_review(self):
        product = ProductFactory(seller=self.seller, admin_notes="Looks good", approved_by=self.admin)

        result = self.service.update_product(
            product.id, {"price": Decimal("30.00"), "stock_quantity": 0, "ignored": "x"}, self.seller
        )

        self.assertTrue(result.ok)
        product.refresh_from_db()
        self.assertEqual(product.status, Product.STATUS_PENDING)
        self.assertEqual(product.price, Decimal("30.00"))
        self.assertEqual(product.stock_quantity, 0)
        self.assertEqual(product.admin_notes, "")
        self.assertIsNone(product.approved_by)

    def test_only_owner_can_update_or_delete(self):
        product = ProductFactory(name="Desk lamp")
        stranger = SellerFactory()

        updated = self.service.update_product(product.id, {"name": "Stolen"}, stranger)
        deleted = self.service.delete_product(product.id, stranger)

        self.assertEqual(updated.error, ErrorCodes.NOT_PRODUCT_OWNER)
        self.assertEqual(deleted.error, ErrorCodes.NOT_PRODUCT_OWNER)
        product.refresh_from_db()
        self.assertEqual(product.name, "Desk lamp")
        self.assertEqual(product.status, Product.STATUS_APPROVED)

    def test_delete_removes_listing_and_its_reviews(self):
        product = ProductFactory(seller=self.seller)
        ProductReviewFactory(product=product)

        result = self.service.delete_product(product.id, self.seller)

        self.assertEqual(result.value, "deleted")
        self.assertFalse(Product.objects.filter(id=product.id).exists())

    def test_delete_deactivates_listing_with_orders(self):
        product = ProductFactory(seller=self.seller)
        OrderFactory(product=product)

        result = self.service.delete_product(product.id, self.seller)

        self.assertEqual(result.value, "deactivated")
        product.refresh_from_db()
        self.assertEqual(product.status, Product.STATUS_INACTIVE)

    def test_update_unknown_product(self):
        result = self.service.update_product("00000000-0000-0000-0000-000000000000", {"name": "x"}, self.seller)

        self.assertEqual(result.error, ErrorCodes.PRODUCT_NOT_FOUND)

    def test_dashboard_stats(self):
        ProductFactory(seller=self.seller, view_count=4)
        PendingProductFactory(seller=self.seller, view_count=1)
        ProductFactory(status=Product.STATUS_REJECTED, view_count=0)

        result = self.service.get_dashboard_stats()

        self.assertTrue(result.ok)
        self.assertEqual(
            result.value["stats"],
            {
                "total_products": 3,
                "pending_products": 1,
                "approved_products": 1,
                "rejected_products": 1,
                "inactive_products": 0,
                "total_sellers": 2,
                "total_views": 5,
            },
        )
        self.assertEqual(len(result.value["recent_products"]), 3)

    def test_dashboard_stats_on_empty_catalog(self):
        result = self.service.get_dashboard_stats()

        self.assertEqual(result.value["stats"]["total_products"], 0)
        self.assertEqual(result.value["stats"]["total_views"], 0)
        self.assertEqual(result.value["recent_products"], [])

    def test_list_all_products_covers_every_status(self):
        ProductFactory(seller=self.seller)
        rejected = ProductFactory(seller=self.seller, status=Product.STATUS_REJECTED, name="Broken chair")
        PendingProductFactory()

        everything = self.service.list_all_products()
        by_status = self.service.list_all_products(filters={"status": Product.STATUS_REJECTED})
        by_seller = self.service.list_all_products(filters={"seller": self.seller.id})
        by_search = self.service.list_all_products(filters={"search": "broken"})

        self.assertEqual(everything.value["pagination"]["total_count"], 3)
        self.assertEqual([p.id for p in by_status.value["products"]], [rejected.id])
        self.assertEqual(by_seller.value["pagination"]["total_count"], 2)
        self.assertEqual([p.id for p in by_search.value["products"]], [rejected.id])
