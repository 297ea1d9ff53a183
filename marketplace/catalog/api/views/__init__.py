from .product_views import AdminProductViewSet, ProductViewSet
from .review_views import ReviewViewSet
from .saved_item_views import SavedItemViewSet


__all__ = ["AdminProductViewSet", "ProductViewSet", "ReviewViewSet", "SavedItemViewSet"]
