"""
Response Serializers for Marketplace API Documentation

These serializers define the structure of API responses for OpenAPI schema generation.
They are NOT used for data validation, only for documentation in Swagger/ReDoc.
"""

from rest_framework import serializers

from marketplace.catalog.api.serializers.product_serializers import ProductDetailSerializer, ProductListSerializer
from marketplace.catalog.api.serializers.review_serializers import HelpfulVoteSerializer, ReviewSerializer
from marketplace.catalog.api.serializers.saved_item_serializers import SavedItemCheckSerializer, SavedItemSerializer
from marketplace.ordering.api.serializers.order_serializers import OrderSerializer

# ===== Common Response Serializers =====


class ErrorResponseSerializer(serializers.Serializer):
    """Standard error response"""

    success = serializers.BooleanField(default=False)
    error = serializers.CharField(help_text="Error code identifier")
    detail = serializers.CharField(help_text="Human-readable error message")


class ValidationErrorResponseSerializer(serializers.Serializer):
    """Request body failed validation"""

    success = serializers.BooleanField(default=False)
    error = serializers.CharField(help_text="Always 'validation_error'")
    detail = serializers.CharField(help_text="Summary message")
    errors = serializers.DictField(help_text="Field-level error messages")


class InvalidTransitionResponseSerializer(ErrorResponseSerializer):
    """Requested status is not reachable from the current one"""

    current_status = serializers.CharField()
    valid_transitions = serializers.ListField(child=serializers.CharField())


class PaginationSerializer(serializers.Serializer):
    current_page = serializers.IntegerField()
    total_pages = serializers.IntegerField()
    total_count = serializers.IntegerField()
    page_size = serializers.IntegerField()
    has_next = serializers.BooleanField()
    has_prev = serializers.BooleanField()


# ===== Product Response Serializers =====


class ProductListDataSerializer(serializers.Serializer):
    products = ProductListSerializer(many=True)
    pagination = PaginationSerializer()


class ProductListResponseSerializer(serializers.Serializer):
    """Paginated product list response"""

    success = serializers.BooleanField(default=True)
    data = ProductListDataSerializer()


class ProductDetailResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField(default=True)
    message = serializers.CharField(required=False)
    data = ProductDetailSerializer()


# ===== Order Response Serializers =====


class OrderDetailResponseSerializer(serializers.Serializer):
    """Single order response"""

    success = serializers.BooleanField(default=True)
    message = serializers.CharField(required=False)
    data = OrderSerializer()


class OrderListDataSerializer(serializers.Serializer):
    orders = OrderSerializer(many=True)
    pagination = PaginationSerializer()


class OrderListResponseSerializer(serializers.Serializer):
    """Paginated order list response"""

    success = serializers.BooleanField(default=True)
    data = OrderListDataSerializer()


# ===== Review Response Serializers =====


class RatingSummarySerializer(serializers.Serializer):
    average_rating = serializers.FloatField()
    total_reviews = serializers.IntegerField()
    rating_distribution = serializers.DictField(child=serializers.IntegerField(), help_text="Star level to count")


class ReviewListDataSerializer(serializers.Serializer):
    reviews = ReviewSerializer(many=True)
    pagination = PaginationSerializer()
    summary = RatingSummarySerializer(required=False)


class ReviewListResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField(default=True)
    data = ReviewListDataSerializer()


class ReviewDetailResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField(default=True)
    message = serializers.CharField(required=False)
    data = ReviewSerializer()


class HelpfulVoteResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField(default=True)
    message = serializers.CharField()
    data = HelpfulVoteSerializer()


class MessageResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField(default=True)
    message = serializers.CharField()


# ===== Saved Item Response Serializers =====


class SavedItemDetailResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField(default=True)
    message = serializers.CharField(required=False)
    data = SavedItemSerializer()


class SavedItemListDataSerializer(serializers.Serializer):
    saved_items = SavedItemSerializer(many=True)
    pagination = PaginationSerializer()


class SavedItemListResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField(default=True)
    data = SavedItemListDataSerializer()


class SavedItemCheckResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField(default=True)
    data = SavedItemCheckSerializer()


# ===== Admin Response Serializers =====


class DashboardStatsSerializer(serializers.Serializer):
    total_products = serializers.IntegerField()
    pending_products = serializers.IntegerField()
    approved_products = serializers.IntegerField()
    rejected_products = serializers.IntegerField()
    inactive_products = serializers.IntegerField()
    total_sellers = serializers.IntegerField()
    total_views = serializers.IntegerField()


class DashboardDataSerializer(serializers.Serializer):
    stats = DashboardStatsSerializer()
    recent_products = ProductDetailSerializer(many=True)


class DashboardResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField(default=True)
    data = DashboardDataSerializer()
