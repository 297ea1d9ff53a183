"""
InventoryService - Stock Management

Handles stock reservation at order time and its compensating release on
cancellation. Reservation is a single conditional UPDATE so concurrent
orders can never oversell a listing.
"""

import logging

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from marketplace.catalog.domain.models.catalog import Product
from marketplace.infra.observability.metrics import stock_reservation_failures

from .base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

logger = logging.getLogger(__name__)


class InventoryService(BaseService):
    """
    Service for managing product inventory and stock reservations.
    """

    @BaseService.log_performance
    @transaction.atomic
    def reserve_stock(self, product_id: str, quantity: int) -> ServiceResult[dict]:
        """
        Decrement stock by ``quantity`` if, and only if, the listing is approved
        and enough is on hand.

        The checks and the decrement are one
        UPDATE ... WHERE status = 'approved' AND stock >= quantity statement;
        zero affected rows means the listing is gone, unapproved or short.

        Args:
            product_id: UUID of the product
            quantity: Quantity to reserve

        Returns:
            ServiceResult with reservation details or error:
            - quantity_reserved: Reserved amount
            - new_stock: Updated stock level
            - reserved_at: Timestamp
        """
        if quantity <= 0:
            return service_err(ErrorCodes.INVALID_QUANTITY, "Quantity must be positive")

        try:
            updated = Product.objects.filter(
                id=product_id, status=Product.STATUS_APPROVED, stock_quantity__gte=quantity
            ).update(stock_quantity=F("stock_quantity") - quantity)

            if updated == 0:
                stock_reservation_failures.inc()
                current = Product.objects.filter(id=product_id).values_list("status", "stock_quantity").first()
                if current is None:
                    return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")
                product_status, available = current
                if product_status != Product.STATUS_APPROVED:
                    return service_err(ErrorCodes.PRODUCT_NOT_APPROVED, "Product is not available for purchase")
                return service_err(
                    ErrorCodes.INSUFFICIENT_STOCK,
                    f"Insufficient stock. Available: {available}, Requested: {quantity}",
                )

            new_stock = Product.objects.filter(id=product_id).values_list("stock_quantity", flat=True).get()

            self.logger.info(f"Stock reserved: product={product_id}, quantity={quantity}, new_stock={new_stock}")

            return service_ok(
                {
                    "product_id": str(product_id),
                    "quantity_reserved": quantity,
                    "new_stock": new_stock,
                    "reserved_at": timezone.now().isoformat(),
                }
            )

        except Exception as e:
            stock_reservation_failures.inc()
            self.logger.error(f"Error reserving stock for product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    @transaction.atomic
    def release_stock(self, product_id: str, quantity: int, reason: str = "order_cancelled") -> ServiceResult[dict]:
        """
        Release reserved stock back to inventory (atomic operation).

        Args:
            product_id: UUID of the product
            quantity: Quantity to release
            reason: Reason for release (for audit logging)

        Returns:
            ServiceResult with release details or error
        """
        if quantity <= 0:
            return service_err(ErrorCodes.INVALID_QUANTITY, "Quantity must be positive")

        try:
            product = Product.objects.select_for_update().get(id=product_id)

            old_quantity = product.stock_quantity
            product.stock_quantity = F("stock_quantity") + quantity
            product.save(update_fields=["stock_quantity"])
            product.refresh_from_db(fields=["stock_quantity"])

            self.logger.info(
                f"Stock released: product={product.name}, "
                f"quantity={quantity}, reason={reason}, "
                f"stock: {old_quantity} -> {product.stock_quantity}"
            )

            return service_ok(
                {
                    "product_id": str(product_id),
                    "quantity_released": quantity,
                    "old_stock": old_quantity,
                    "new_stock": product.stock_quantity,
                    "reason": reason,
                    "released_at": timezone.now().isoformat(),
                }
            )

        except Product.DoesNotExist:
            return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")
        except Exception as e:
            self.logger.error(f"Error releasing stock for product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))
