"""
SavedItemService - Saved products

A buyer's bookmark list. Only approved listings can be saved, each at most
once per user.
"""

import logging
from typing import Any, Dict

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from marketplace.catalog.domain.models.catalog import Product
from marketplace.catalog.domain.models.interaction import SavedItem

from .base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok

User = get_user_model()
logger = logging.getLogger(__name__)


class SavedItemService(BaseService):
    @BaseService.log_performance
    def save_product(self, user: User, product_id: str, notes: str = "") -> ServiceResult[SavedItem]:
        try:
            try:
                product = Product.objects.get(id=product_id)
            except Product.DoesNotExist:
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, "Product not found")

            if product.status != Product.STATUS_APPROVED:
                return service_err(ErrorCodes.PRODUCT_NOT_APPROVED, "Cannot save unapproved products")

            try:
                with transaction.atomic():
                    saved_item = SavedItem.objects.create(user=user, product=product, notes=notes or "")
            except IntegrityError:
                return service_err(ErrorCodes.ALREADY_SAVED, "Product is already in your saved items")

            self.logger.info(f"User {user.id} saved product {product.id}")
            return service_ok(saved_item)

        except Exception as e:
            self.logger.error(f"Error saving product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def list_saved_items(self, user: User, page: int = 1, page_size: int = 10) -> ServiceResult[Dict[str, Any]]:
        """The caller's saved items, most recently saved first."""
        try:
            queryset = SavedItem.objects.select_related("product", "product__seller").filter(user=user)
            saved_items, pagination = paginate(queryset.order_by("-created_at"), page, page_size)
            return service_ok({"saved_items": saved_items, "pagination": pagination})
        except Exception as e:
            self.logger.error(f"Error listing saved items of user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def update_notes(self, user: User, saved_item_id: int, notes: str) -> ServiceResult[SavedItem]:
        try:
            result = self._get_own(user, saved_item_id, "update")
            if not result.ok:
                return result

            saved_item = result.value
            saved_item.notes = notes or ""
            saved_item.save(update_fields=["notes", "updated_at"])

            return service_ok(saved_item)

        except Exception as e:
            self.logger.error(f"Error updating saved item {saved_item_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def remove(self, user: User, saved_item_id: int) -> ServiceResult[bool]:
        try:
            result = self._get_own(user, saved_item_id, "remove")
            if not result.ok:
                return result

            result.value.delete()
            self.logger.info(f"User {user.id} removed saved item {saved_item_id}")

            return service_ok(True)

        except Exception as e:
            self.logger.error(f"Error removing saved item {saved_item_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def check_saved(self, user: User, product_id: str) -> ServiceResult[Dict[str, Any]]:
        """Whether the caller has saved the product, with the saved item if so."""
        try:
            saved_item = SavedItem.objects.filter(user=user, product_id=product_id).first()
            return service_ok({"is_saved": saved_item is not None, "saved_item": saved_item})
        except Exception as e:
            self.logger.error(f"Error checking saved product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @staticmethod
    def _get_own(user: User, saved_item_id: int, verb: str) -> ServiceResult[SavedItem]:
        try:
            saved_item = SavedItem.objects.select_related("product").get(id=saved_item_id)
        except SavedItem.DoesNotExist:
            return service_err(ErrorCodes.SAVED_ITEM_NOT_FOUND, "Saved item not found")

        if saved_item.user_id != user.pk:
            return service_err(ErrorCodes.NOT_SAVED_ITEM_OWNER, f"You can only {verb} your own saved items")

        return service_ok(saved_item)
