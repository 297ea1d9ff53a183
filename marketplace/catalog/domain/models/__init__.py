from .catalog import Product
from .interaction import ProductReview, ProductReviewHelpful, SavedItem


__all__ = [
    "Product",
    "ProductReview",
    "ProductReviewHelpful",
    "SavedItem",
]
