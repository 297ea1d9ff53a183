# Marketplace API Serializers

# Import response serializers for API documentation
from .response_serializers import (
    DashboardResponseSerializer,
    ErrorResponseSerializer,
    HelpfulVoteResponseSerializer,
    InvalidTransitionResponseSerializer,
    MessageResponseSerializer,
    OrderDetailResponseSerializer,
    OrderListResponseSerializer,
    PaginationSerializer,
    ProductDetailResponseSerializer,
    ProductListResponseSerializer,
    ReviewDetailResponseSerializer,
    ReviewListResponseSerializer,
    SavedItemCheckResponseSerializer,
    SavedItemDetailResponseSerializer,
    SavedItemListResponseSerializer,
    ValidationErrorResponseSerializer,
)


__all__ = [
    "DashboardResponseSerializer",
    "ErrorResponseSerializer",
    "HelpfulVoteResponseSerializer",
    "InvalidTransitionResponseSerializer",
    "MessageResponseSerializer",
    "OrderDetailResponseSerializer",
    "OrderListResponseSerializer",
    "PaginationSerializer",
    "ProductDetailResponseSerializer",
    "ProductListResponseSerializer",
    "ReviewDetailResponseSerializer",
    "ReviewListResponseSerializer",
    "SavedItemCheckResponseSerializer",
    "SavedItemDetailResponseSerializer",
    "SavedItemListResponseSerializer",
    "ValidationErrorResponseSerializer",
]
