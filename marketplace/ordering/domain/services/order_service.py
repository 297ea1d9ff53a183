"""
OrderService - Order Lifecycle Management

Creates single-product orders against approved listings, advances them
through the fulfillment lifecycle on behalf of the seller, and lets the
buyer cancel early with the reserved stock put back.
"""

import logging
from typing import Dict, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from authentication.infra.observability.tracing import tracer
from infrastructure.events import get_event_bus
from marketplace.catalog.domain.models.catalog import Product
from marketplace.domain.events.order_events import OrderCancelledEvent, OrderPlacedEvent, OrderStatusChangedEvent
from marketplace.infra.observability.metrics import (
    order_cancellations_total,
    order_status_transitions_total,
    order_value,
    orders_placed_total,
)
from marketplace.ordering.domain import lifecycle
from marketplace.ordering.domain.models.order import Order
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok
from marketplace.services.inventory_service import InventoryService

User = get_user_model()
logger = logging.getLogger(__name__)


class OrderService(BaseService):
    """
    Service for managing order lifecycle.
    """

    def __init__(self, inventory_service: InventoryService = None, notification_service=None, event_bus=None):
        """
        Initialize OrderService.

        Args:
            inventory_service: Service for stock management (injected)
            notification_service: Service storing user notifications (injected)
            event_bus: Event bus for publishing domain events (injected)
        """
        super().__init__()
        if notification_service is None:
            from notifications.services import NotificationService

            notification_service = NotificationService()

        self.inventory_service = inventory_service or InventoryService()
        self.notification_service = notification_service
        self.event_bus = event_bus or get_event_bus()

    @BaseService.log_performance
    def create_order(
        self,
        buyer: User,
        product_id: str,
        quantity: int = 1,
        payment_method: Optional[str] = None,
        shipping_address: Optional[Dict] = None,
        shipping_method: str = lifecycle.DEFAULT_SHIPPING_METHOD,
        notes: str = "",
    ) -> ServiceResult[Order]:
        """
        Create an order for ``quantity`` units of one product.

        Preconditions are checked in order and the first failure is returned
        with nothing written: payment method, shipping address, quantity,
        product existence, product approval, stock.
        """
        with tracer.start_as_current_span("order_create_transaction") as span:
            span.set_attribute("user.id", str(buyer.id))
            span.set_attribute("product.id", str(product_id))

            if payment_method not in lifecycle.PAYMENT_METHODS:
                return service_err(ErrorCodes.VALIDATION_ERROR, "A valid payment method is required")

            missing = lifecycle.missing_address_fields(shipping_address)
            if missing:
                return service_err(
                    ErrorCodes.VALIDATION_ERROR,
                    f"Shipping address is missing required fields: {', '.join(missing)}",
                )

            if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
                return service_err(ErrorCodes.INVALID_QUANTITY, "Quantity must be at least 1")
            if quantity > lifecycle.MAX_ORDER_QUANTITY:
                return service_err(
                    ErrorCodes.INVALID_QUANTITY, f"Quantity cannot exceed {lifecycle.MAX_ORDER_QUANTITY} per order"
                )

            try:
                with tracer.start_as_current_span("load_product"):
                    try:
                        product = Product.objects.select_related("seller").get(id=product_id)
                    except (Product.DoesNotExist, ValidationError, ValueError):
                        return service_err(ErrorCodes.PRODUCT_NOT_FOUND, "Product not found")

                if product.status != Product.STATUS_APPROVED:
                    return service_err(
                        ErrorCodes.PRODUCT_NOT_APPROVED, "Product is not available for purchase"
                    )

                if product.stock_quantity < quantity:
                    orders_placed_total.labels(status="rejected").inc()
                    return service_err(
                        ErrorCodes.INSUFFICIENT_STOCK,
                        f"Insufficient stock. Available: {product.stock_quantity}, Requested: {quantity}",
                    )

                if shipping_method not in lifecycle.SHIPPING_COSTS:
                    shipping_method = lifecycle.DEFAULT_SHIPPING_METHOD
                shipping_cost = lifecycle.shipping_cost_for(shipping_method)
                total_amount = lifecycle.order_total(product.price, quantity, shipping_cost)

                with transaction.atomic():
                    with tracer.start_as_current_span("reserve_inventory"):
                        reserve_result = self.inventory_service.reserve_stock(product_id=product.id, quantity=quantity)
                        if not reserve_result.ok:
                            orders_placed_total.labels(status="rejected").inc()
                            return reserve_result

                    with tracer.start_as_current_span("save_order"):
                        order = Order.objects.create(
                            buyer=buyer,
                            seller=product.seller,
                            product=product,
                            quantity=quantity,
                            unit_price=product.price,
                            currency=product.currency,
                            shipping_cost=shipping_cost,
                            total_amount=total_amount,
                            payment_method=payment_method,
                            shipping_address=shipping_address,
                            shipping_method=shipping_method,
                            notes=notes or "",
                            status=lifecycle.PENDING,
                        )
                        order = self._reload(order)

                    self.notification_service.emit(
                        user=product.seller,
                        notification_type="order_created",
                        title="New Order Received",
                        message=f"You have received a new order for {product.name}",
                        related_order=order,
                        related_product=product,
                        metadata={
                            "order_id": str(order.id),
                            "product_name": product.name,
                            "quantity": quantity,
                            "total_amount": str(total_amount),
                        },
                    )

                with tracer.start_as_current_span("publish_event"):
                    event = OrderPlacedEvent(
                        order_id=str(order.id),
                        buyer_id=str(buyer.id),
                        seller_id=str(product.seller_id),
                        product_id=str(product.id),
                        total_amount=order.total_amount,
                    )
                    self._publish(event)

                orders_placed_total.labels(status="success").inc()
                order_value.observe(float(order.total_amount))

                self.logger.info(
                    f"Created order {order.id} for user {buyer.id}: "
                    f"{quantity} x {product.id}, total {order.currency} {order.total_amount}"
                )

                span.set_attribute("order.id", str(order.id))
                span.set_attribute("order.total", str(order.total_amount))

                return service_ok(order)

            except Exception as e:
                self.logger.error(f"Error creating order for user {buyer.id}: {e}", exc_info=True)
                span.record_exception(e)
                orders_placed_total.labels(status="failure").inc()
                return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def update_status(
        self,
        order_id: str,
        user: User,
        new_status: str,
        tracking_number: Optional[str] = None,
        estimated_delivery=None,
    ) -> ServiceResult[Order]:
        """
        Move an order to ``new_status`` on behalf of its seller.

        The order row is locked for the whole read-check-write. Targets
        outside the transition table (including the current status itself)
        fail with ``invalid_transition`` and the list of valid targets.
        """
        try:
            with transaction.atomic():
                order = Order.objects.select_for_update().get(id=order_id)

                if order.seller_id != user.pk:
                    return service_err(ErrorCodes.NOT_ORDER_SELLER, "You can only update orders for your own products")

                valid = lifecycle.allowed_transitions(order.status)
                if valid is None:
                    self.logger.error(f"Order {order_id} has unrecognised status '{order.status}'")
                    return service_err(
                        ErrorCodes.INVALID_CURRENT_STATUS, f"Order has an invalid current status: {order.status}"
                    )

                if new_status not in valid:
                    valid_text = ", ".join(valid) if valid else "none"
                    return service_err(
                        ErrorCodes.INVALID_TRANSITION,
                        f"Cannot change status from {order.status} to {new_status}. "
                        f"Valid transitions are: {valid_text}",
                        current_status=order.status,
                        valid_transitions=valid,
                    )

                previous_status = order.status
                order.status = new_status
                update_fields = ["status", "updated_at"]

                if tracking_number:
                    order.tracking_number = tracking_number
                    update_fields.append("tracking_number")
                if estimated_delivery:
                    order.estimated_delivery = estimated_delivery
                    update_fields.append("estimated_delivery")
                if new_status == lifecycle.CANCELLED:
                    order.cancelled_at = timezone.now()
                    order.cancelled_by = user
                    update_fields.extend(["cancelled_at", "cancelled_by"])

                order.save(update_fields=update_fields)

                notification_type = lifecycle.STATUS_NOTIFICATION_TYPES.get(new_status)
                if notification_type:
                    self.notification_service.emit(
                        user=order.buyer,
                        notification_type=notification_type,
                        title=f"Order {new_status.capitalize()}",
                        message=f"Your order has been {new_status}",
                        related_order=order,
                        metadata={
                            "order_id": str(order.id),
                            "status": new_status,
                            "tracking_number": tracking_number or "",
                        },
                    )

                order = self._reload(order)

            order_status_transitions_total.labels(from_status=previous_status, to_status=new_status).inc()
            if new_status == lifecycle.CANCELLED:
                order_cancellations_total.labels(actor="seller").inc()

            self._publish(
                OrderStatusChangedEvent(
                    order_id=str(order.id), user_id=str(user.id), from_status=previous_status, to_status=new_status
                )
            )

            self.logger.info(f"Order {order_id} moved {previous_status} -> {new_status} by user {user.id}")

            return service_ok(order)

        except Order.DoesNotExist:
            return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")
        except Exception as e:
            self.logger.error(f"Error updating status for order {order_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def cancel_order(self, order_id: str, user: User, reason: str = "") -> ServiceResult[Order]:
        """
        Cancel an order (buyer only, before shipment).

        Puts the order's quantity back into the product's stock in the same
        transaction as the status change.

        Example:
            >>> result = order_service.cancel_order(order_id, user=buyer, reason="Ordered the wrong size")
        """
        try:
            with transaction.atomic():
                order = Order.objects.select_for_update().get(id=order_id)

                if order.buyer_id != user.pk:
                    return service_err(ErrorCodes.NOT_ORDER_OWNER, "You can only cancel your own orders")

                if order.status not in lifecycle.CANCELLABLE_STATUSES:
                    return service_err(
                        ErrorCodes.ORDER_CANNOT_CANCEL,
                        f"Cannot cancel order with status: {order.status}",
                        current_status=order.status,
                    )

                order.status = lifecycle.CANCELLED
                order.cancellation_reason = reason
                order.cancelled_by = user
                order.cancelled_at = timezone.now()
                order.save(update_fields=["status", "cancellation_reason", "cancelled_by", "cancelled_at", "updated_at"])

                release_result = self.inventory_service.release_stock(
                    product_id=order.product_id, quantity=order.quantity, reason=f"order_cancelled_{order.id}"
                )
                if not release_result.ok:
                    # Restoring stock is part of the cancellation; abort it entirely.
                    raise RuntimeError(f"Stock release failed: {release_result.error_detail}")

                self.notification_service.emit(
                    user=order.seller,
                    notification_type="order_cancelled",
                    title="Order Cancelled",
                    message="An order has been cancelled by the buyer",
                    related_order=order,
                    metadata={"order_id": str(order.id), "reason": reason},
                )

                order = self._reload(order)

            order_cancellations_total.labels(actor="buyer").inc()
            self._publish(
                OrderCancelledEvent(
                    order_id=str(order.id), user_id=str(user.id), reason=reason, quantity_restored=order.quantity
                )
            )

            self.logger.info(f"Cancelled order {order_id} by user {user.id}: {reason}")

            return service_ok(order)

        except Order.DoesNotExist:
            return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")
        except Exception as e:
            self.logger.error(f"Error cancelling order {order_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def get_order(self, order_id: str, user: User) -> ServiceResult[Order]:
        """
        Get order details (buyer or seller only).

        Example:
            >>> result = order_service.get_order(order_id, user)
            >>> if result.ok:
            ...     order = result.value
        """
        try:
            order = self._display_queryset().get(id=order_id)

            if user.pk not in (order.buyer_id, order.seller_id):
                return service_err(ErrorCodes.PERMISSION_DENIED, "You do not have access to this order")

            return service_ok(order)

        except Order.DoesNotExist:
            return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")
        except Exception as e:
            self.logger.error(f"Error getting order {order_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def list_buyer_orders(
        self, user: User, status: Optional[str] = None, page: int = 1, page_size: int = None
    ) -> ServiceResult[Dict]:
        """
        List orders the user has placed, newest first.

        Returns:
            ServiceResult with {"orders": [...], "pagination": {...}}
        """
        return self._list_orders({"buyer": user}, user, status, page, page_size)

    @BaseService.log_performance
    def list_seller_orders(
        self, user: User, status: Optional[str] = None, page: int = 1, page_size: int = None
    ) -> ServiceResult[Dict]:
        """
        List orders placed against the user's listings, newest first.
        """
        return self._list_orders({"seller": user}, user, status, page, page_size)

    def _list_orders(self, filters: Dict, user: User, status, page, page_size) -> ServiceResult[Dict]:
        page_size = page_size or getattr(settings, "ORDERS_PAGE_SIZE", 10)

        try:
            queryset = self._display_queryset().filter(**filters)
            if status:
                queryset = queryset.filter(status=status)

            orders, pagination = paginate(queryset.order_by("-created_at"), page, page_size)

            self.logger.info(f"Listed orders for user {user.id}: {pagination['total_count']} total, page {page}")

            return service_ok({"orders": orders, "pagination": pagination})

        except Exception as e:
            self.logger.error(f"Error listing orders for user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def _display_queryset(self):
        return Order.objects.select_related("buyer", "seller", "product", "cancelled_by")

    def _reload(self, order: Order) -> Order:
        return self._display_queryset().get(id=order.id)

    def _publish(self, event) -> None:
        try:
            self.event_bus.publish(event.event_type, event.payload)
            self.logger.debug(f"Published {event}")
        except Exception as e:
            self.logger.error(f"Failed to publish {event.event_type}: {e}")
