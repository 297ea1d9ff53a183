from marketplace.catalog.domain.models import Product, ProductReview, ProductReviewHelpful, SavedItem
from marketplace.ordering.domain.models import Order


__all__ = [
    "Product",
    "ProductReview",
    "ProductReviewHelpful",
    "SavedItem",
    "Order",
]
