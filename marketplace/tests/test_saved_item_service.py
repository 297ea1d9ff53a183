import uuid

from django.test import TestCase

from marketplace.models import SavedItem
from marketplace.services import ErrorCodes, SavedItemService
from marketplace.tests.factories import PendingProductFactory, ProductFactory, SavedItemFactory, UserFactory


class SavedItemServiceTest(TestCase):
    def setUp(self):
        self.service = SavedItemService()
        self.user = UserFactory()
        self.product = ProductFactory()

    def test_save_product(self):
        result = self.service.save_product(self.user, self.product.id, notes="Gift idea")

        self.assertTrue(result.ok)
        self.assertEqual(result.value.notes, "Gift idea")
        self.assertTrue(SavedItem.objects.filter(user=self.user, product=self.product).exists())

    def test_save_twice(self):
        self.service.save_product(self.user, self.product.id)

        result = self.service.save_product(self.user, self.product.id)

        self.assertEqual(result.error, ErrorCodes.ALREADY_SAVED)
        self.assertEqual(SavedItem.objects.count(), 1)

    def test_cannot_save_unapproved_or_missing_product(self):
        pending = self.service.save_product(self.user, PendingProductFactory().id)
        missing = self.service.save_product(self.user, uuid.uuid4())

        self.assertEqual(pending.error, ErrorCodes.PRODUCT_NOT_APPROVED)
        self.assertEqual(missing.error, ErrorCodes.PRODUCT_NOT_FOUND)
        self.assertFalse(SavedItem.objects.exists())

    def test_list_only_own_items(self):
        SavedItemFactory(user=self.user)
        SavedItemFactory(user=self.user)
        SavedItemFactory()

        result = self.service.list_saved_items(self.user, page=1, page_size=1)

        self.assertEqual(len(result.value["saved_items"]), 1)
        self.assertEqual(result.value["pagination"]["total_count"], 2)
        self.assertTrue(result.value["pagination"]["has_next"])

    def test_update_notes_and_remove(self):
        saved_item = SavedItemFactory(user=self.user, product=self.product)

        updated = self.service.update_notes(self.user, saved_item.id, "Wait for a sale")
        removed = self.service.remove(self.user, saved_item.id)

        self.assertEqual(updated.value.notes, "Wait for a sale")
        self.assertTrue(removed.ok)
        self.assertFalse(SavedItem.objects.exists())

    def test_cannot_touch_others_items(self):
        saved_item = SavedItemFactory(notes="Mine")

        updated = self.service.update_notes(self.user, saved_item.id, "Yours")
        removed = self.service.remove(self.user, saved_item.id)

        self.assertEqual(updated.error, ErrorCodes.NOT_SAVED_ITEM_OWNER)
        self.assertEqual(updated.error_detail, "You can only update your own saved items")
        self.assertEqual(removed.error, ErrorCodes.NOT_SAVED_ITEM_OWNER)
        saved_item.refresh_from_db()
        self.assertEqual(saved_item.notes, "Mine")

    def test_unknown_saved_item(self):
        self.assertEqual(self.service.remove(self.user, 999999).error, ErrorCodes.SAVED_ITEM_NOT_FOUND)

    def test_check_saved(self):
        saved_item = SavedItemFactory(user=self.user, product=self.product)

        saved = self.service.check_saved(self.user, self.product.id)
        not_saved = self.service.check_saved(UserFactory(), self.product.id)

        self.assertEqual(saved.value, {"is_saved": True, "saved_item": saved_item})
        self.assertEqual(not_saved.value, {"is_saved": False, "saved_item": None})
