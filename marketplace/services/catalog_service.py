"""
CatalogService - Product listings & moderation

Handles public browsing of approved listings, seller listing management and
the admin approval queue. New and edited listings always wait in pending review.
"""

import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, F, Q, Sum
from django.utils import timezone

from authentication.permissions import ROLE_ADMIN, ROLE_SELLER, user_has_role
from marketplace.catalog.domain.models.catalog import Product
from marketplace.infra.observability.metrics import product_moderation_total

from .base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok

User = get_user_model()
logger = logging.getLogger(__name__)


class CatalogService(BaseService):
    """
    Service for managing product catalog operations.

    Responsibilities:
    - List approved products with filtering and pagination
    - Get product details (approved, or own listing, or admin)
    - Create, edit and delete own listings (seller only)
    - Review pending listings, browse all listings and dashboard stats (admin only)
    """

    ALLOWED_ORDERINGS = ["-created_at", "created_at", "price", "-price", "-view_count"]
    EDITABLE_FIELDS = ("name", "description", "price", "currency", "stock_quantity", "condition", "tags")

    def __init__(self, notification_service=None):
        """
        Initialize CatalogService.

        Args:
            notification_service: Service storing user notifications (injected)
        """
        super().__init__()
        if notification_service is None:
            from notifications.services import NotificationService

            notification_service = NotificationService()
        self.notification_service = notification_service

    @BaseService.log_performance
    def list_products(
        self,
        filters: Optional[Dict[str, Any]] = None,
        page: int = 1,
        page_size: int = None,
        ordering: str = "-created_at",
    ) -> ServiceResult[Dict[str, Any]]:
        """
        List approved products with filtering and pagination.

        Args:
            filters: Optional filters (seller, condition, min_price, max_price, search)
            page: Page number (1-indexed)
            page_size: Items per page
            ordering: Sort order (default: newest first)

        Returns:
            ServiceResult with {"products": [...], "pagination": {...}}
        """
        page_size = page_size or getattr(settings, "PRODUCTS_PAGE_SIZE", 20)

        try:
            filters = filters or {}

            queryset = Product.objects.select_related("seller").filter(status=Product.STATUS_APPROVED)

            if filters.get("seller"):
                queryset = queryset.filter(seller__id=filters["seller"])

            if filters.get("condition"):
                queryset = queryset.filter(condition=filters["condition"])

            if filters.get("min_price") is not None:
                queryset = queryset.filter(price__gte=filters["min_price"])

            if filters.get("max_price") is not None:
                queryset = queryset.filter(price__lte=filters["max_price"])

            if filters.get("search"):
                term = filters["search"]
                queryset = queryset.filter(Q(name__icontains=term) | Q(description__icontains=term))

            if ordering not in self.ALLOWED_ORDERINGS:
                ordering = "-created_at"

            products, pagination = paginate(queryset.order_by(ordering), page, page_size)

            self.logger.info(f"Listed products: count={pagination['total_count']}, page={page}")

            return service_ok({"products": products, "pagination": pagination})

        except Exception as e:
            self.logger.error(f"Error listing products: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def get_product(self, product_id: str, user: Optional[User] = None, track_view: bool = True) -> ServiceResult[Product]:
        """
        Get product details by ID.

        Listings that are not approved are only visible to their seller and admins.
        """
        try:
            product = Product.objects.select_related("seller").get(id=product_id)

            if product.status != Product.STATUS_APPROVED and not self._can_see_unapproved(product, user):
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")

            if track_view:
                Product.objects.filter(id=product.id).update(view_count=F("view_count") + 1)
                product.view_count += 1

            return service_ok(product)

        except Product.DoesNotExist:
            return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")
        except Exception as e:
            self.logger.error(f"Error getting product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    @transaction.atomic
    def create_product(self, data: Dict[str, Any], user: User) -> ServiceResult[Product]:
        """
        Create a new listing (seller only). It waits in ``pending`` for review.

        Example:
            >>> result = catalog_service.create_product(
            ...     data={"name": "Desk lamp", "price": "24.50", "stock_quantity": 3},
            ...     user=seller_user,
            ... )
        """
        try:
            if not user_has_role(user, ROLE_SELLER):
                return service_err(ErrorCodes.PERMISSION_DENIED, "User is not a seller")

            product = Product.objects.create(
                seller=user,
                name=data["name"],
                description=data.get("description", ""),
                price=data["price"],
                currency=data.get("currency", "USD"),
                stock_quantity=data.get("stock_quantity", 1),
                condition=data.get("condition", "new"),
                tags=data.get("tags", []),
                status=Product.STATUS_PENDING,
            )

            self.logger.info(f"Created product: {product.name} (id={product.id}) by seller {user.id}")

            return service_ok(product)

        except Exception as e:
            self.logger.error(f"Error creating product: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def update_product(self, product_id: str, data: Dict[str, Any], user: User) -> ServiceResult[Product]:
        """
        Edit the caller's own listing. Any edit sends it back to ``pending``
        and clears the previous moderation decision.
        """
        try:
            with transaction.atomic():
                try:
                    product = Product.objects.select_for_update().get(id=product_id)
                except Product.DoesNotExist:
                    return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")

                if product.seller_id != user.pk:
                    return service_err(ErrorCodes.NOT_PRODUCT_OWNER, "You can only update your own products")

                for field in self.EDITABLE_FIELDS:
                    if field in data:
                        setattr(product, field, data[field])

                product.status = Product.STATUS_PENDING
                product.admin_notes = ""
                product.approved_by = None
                product.approved_at = None
                product.save()

            self.logger.info(f"Product {product.id} updated by seller {user.id}, back to pending review")

            return service_ok(product)

        except Exception as e:
            self.logger.error(f"Error updating product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def delete_product(self, product_id: str, user: User) -> ServiceResult[str]:
        """
        Delete the caller's own listing.

        Listings referenced by orders cannot be removed; they are set to
        ``inactive`` instead.

        Returns:
            ServiceResult with "deleted" or "deactivated"
        """
        try:
            with transaction.atomic():
                try:
                    product = Product.objects.select_for_update().get(id=product_id)
                except Product.DoesNotExist:
                    return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")

                if product.seller_id != user.pk:
                    return service_err(ErrorCodes.NOT_PRODUCT_OWNER, "You can only delete your own products")

                if product.orders.exists():
                    product.status = Product.STATUS_INACTIVE
                    product.save(update_fields=["status", "updated_at"])
                    outcome = "deactivated"
                else:
                    product.delete()
                    outcome = "deleted"

            self.logger.info(f"Product {product_id} {outcome} by seller {user.id}")

            return service_ok(outcome)

        except Exception as e:
            self.logger.error(f"Error deleting product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def list_seller_products(self, user: User, status: Optional[str] = None) -> ServiceResult[list]:
        try:
            queryset = Product.objects.filter(seller=user)
            if status:
                queryset = queryset.filter(status=status)
            return service_ok(list(queryset.order_by("-created_at")))
        except Exception as e:
            self.logger.error(f"Error listing products of seller {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def list_pending(self, page: int = 1, page_size: int = 10) -> ServiceResult[Dict[str, Any]]:
        """Admin review queue, newest first."""
        try:
            queryset = Product.objects.select_related("seller").filter(status=Product.STATUS_PENDING)
            products, pagination = paginate(queryset.order_by("-created_at"), page, page_size)
            return service_ok({"products": products, "pagination": pagination})
        except Exception as e:
            self.logger.error(f"Error listing pending products: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def list_all_products(
        self,
        filters: Optional[Dict[str, Any]] = None,
        page: int = 1,
        page_size: int = 20,
        ordering: str = "-created_at",
    ) -> ServiceResult[Dict[str, Any]]:
        """
        Admin view over every listing regardless of status.

        Args:
            filters: Optional filters (status, seller, search)
        """
        try:
            filters = filters or {}

            queryset = Product.objects.select_related("seller")

            if filters.get("status"):
                queryset = queryset.filter(status=filters["status"])

            if filters.get("seller"):
                queryset = queryset.filter(seller__id=filters["seller"])

            if filters.get("search"):
                term = filters["search"]
                queryset = queryset.filter(Q(name__icontains=term) | Q(description__icontains=term))

            if ordering not in self.ALLOWED_ORDERINGS:
                ordering = "-created_at"

            products, pagination = paginate(queryset.order_by(ordering), page, page_size)
            return service_ok({"products": products, "pagination": pagination})

        except Exception as e:
            self.logger.error(f"Error listing all products: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def get_dashboard_stats(self) -> ServiceResult[Dict[str, Any]]:
        """Listing counts per status, distinct sellers, total views and the five newest listings."""
        try:
            totals = Product.objects.aggregate(
                total_products=Count("id"),
                pending_products=Count("id", filter=Q(status=Product.STATUS_PENDING)),
                approved_products=Count("id", filter=Q(status=Product.STATUS_APPROVED)),
                rejected_products=Count("id", filter=Q(status=Product.STATUS_REJECTED)),
                inactive_products=Count("id", filter=Q(status=Product.STATUS_INACTIVE)),
                total_sellers=Count("seller", distinct=True),
                total_views=Sum("view_count"),
            )
            totals["total_views"] = totals["total_views"] or 0

            recent_products = list(Product.objects.select_related("seller").order_by("-created_at")[:5])

            return service_ok({"stats": totals, "recent_products": recent_products})

        except Exception as e:
            self.logger.error(f"Error computing dashboard stats: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def approve_product(self, product_id: str, admin: User, admin_notes: str = "") -> ServiceResult[Product]:
        return self._moderate(product_id, admin, Product.STATUS_APPROVED, admin_notes)

    @BaseService.log_performance
    def reject_product(self, product_id: str, admin: User, admin_notes: str) -> ServiceResult[Product]:
        if not (admin_notes or "").strip():
            return service_err(ErrorCodes.VALIDATION_ERROR, "Admin notes are required for rejection")
        return self._moderate(product_id, admin, Product.STATUS_REJECTED, admin_notes)

    def _moderate(self, product_id: str, admin: User, decision: str, admin_notes: str) -> ServiceResult[Product]:
        try:
            with transaction.atomic():
                product = Product.objects.select_for_update().select_related("seller").get(id=product_id)

                product.status = decision
                product.admin_notes = admin_notes or ""
                product.approved_by = admin
                product.approved_at = timezone.now()
                product.save(update_fields=["status", "admin_notes", "approved_by", "approved_at", "updated_at"])

                if decision == Product.STATUS_APPROVED:
                    title = "Product Approved"
                    message = f"Your product {product.name} has been approved and is now live"
                else:
                    title = "Product Rejected"
                    message = f"Your product {product.name} was rejected: {admin_notes}"

                self.notification_service.emit(
                    user=product.seller,
                    notification_type=f"product_{decision}",
                    title=title,
                    message=message,
                    related_product=product,
                    metadata={"product_id": str(product.id), "admin_notes": product.admin_notes},
                )

            product_moderation_total.labels(decision=decision).inc()
            self.logger.info(f"Product {product.id} {decision} by admin {admin.id}")

            return service_ok(product)

        except Product.DoesNotExist:
            return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")
        except Exception as e:
            self.logger.error(f"Error moderating product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @staticmethod
    def _can_see_unapproved(product: Product, user: Optional[User]) -> bool:
        if user is None or not getattr(user, "is_authenticated", False):
            return False
        return product.seller_id == user.pk or user_has_role(user, ROLE_ADMIN)
