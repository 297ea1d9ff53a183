from .product_serializers import (
    ProductCreateSerializer,
    ProductDetailSerializer,
    ProductListSerializer,
    ProductModerationSerializer,
    ProductRejectionSerializer,
    ProductSummarySerializer,
    ProductUpdateSerializer,
)
from .review_serializers import (
    HelpfulVoteSerializer,
    PageQuerySerializer,
    ReviewListQuerySerializer,
    ReviewSerializer,
    ReviewWriteSerializer,
    UserReviewSerializer,
)
from .saved_item_serializers import SavedItemCheckSerializer, SavedItemNotesSerializer, SavedItemSerializer


__all__ = [
    "HelpfulVoteSerializer",
    "PageQuerySerializer",
    "ProductCreateSerializer",
    "ProductDetailSerializer",
    "ProductListSerializer",
    "ProductModerationSerializer",
    "ProductRejectionSerializer",
    "ProductSummarySerializer",
    "ProductUpdateSerializer",
    "ReviewListQuerySerializer",
    "ReviewSerializer",
    "ReviewWriteSerializer",
    "SavedItemCheckSerializer",
    "SavedItemNotesSerializer",
    "SavedItemSerializer",
    "UserReviewSerializer",
]
