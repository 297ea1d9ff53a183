"""
Marketplace Service Layer

This package contains all business logic for the marketplace app, organized
into domain services.

Services:
- CatalogService: Product browsing, listing creation and moderation
- InventoryService: Stock reservation and release
- OrderService: Order lifecycle management
- ReviewService / ReviewMetricsService: Product reviews and rating summaries
- SavedItemService: Per-user saved products

Usage:
    from marketplace.services import OrderService

    result = order_service.create_order(buyer, product_id, quantity=2, ...)

    if result.ok:
        order = result.value
    else:
        error = result.error
"""

from .base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok
from .catalog_service import CatalogService
from .inventory_service import InventoryService
from .review_metrics_service import ReviewMetricsService
from .review_service import ReviewService
from .saved_item_service import SavedItemService

# Imported last: the order service itself depends on the modules above.
from marketplace.ordering.domain.services.order_service import OrderService  # isort: skip

__all__ = [
    # Base classes
    "BaseService",
    "ServiceResult",
    # Helper functions
    "paginate",
    "service_ok",
    "service_err",
    # Error codes
    "ErrorCodes",
    # Services
    "CatalogService",
    "InventoryService",
    "OrderService",
    "ReviewMetricsService",
    "ReviewService",
    "SavedItemService",
]
