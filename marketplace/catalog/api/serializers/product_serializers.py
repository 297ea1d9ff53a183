import logging

from rest_framework import serializers

from authentication.api.serializers import MinimalUserSerializer
from marketplace.catalog.domain.models.catalog import Product


logger = logging.getLogger(__name__)


class ProductSummarySerializer(serializers.ModelSerializer):
    """Just enough of a product to display it inside an order or notification."""

    class Meta:
        model = Product
        fields = ["id", "name", "price", "currency", "condition", "status"]
        read_only_fields = fields


class ProductListSerializer(serializers.ModelSerializer):
    """Product card for listings"""

    seller = MinimalUserSerializer(read_only=True)
    is_in_stock = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "price",
            "currency",
            "stock_quantity",
            "condition",
            "status",
            "is_featured",
            "is_in_stock",
            "seller",
            "created_at",
        ]
        read_only_fields = fields

    def get_is_in_stock(self, obj):
        return obj.stock_quantity > 0


class ProductDetailSerializer(serializers.ModelSerializer):
    seller = MinimalUserSerializer(read_only=True)
    approved_by = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "currency",
            "stock_quantity",
            "condition",
            "tags",
            "status",
            "admin_notes",
            "approved_by",
            "approved_at",
            "is_featured",
            "view_count",
            "seller",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ProductCreateSerializer(serializers.ModelSerializer):
    """Validates a new listing submitted by a seller."""

    currency = serializers.ChoiceField(choices=Product.CURRENCY_CHOICES, required=False, default="USD")
    stock_quantity = serializers.IntegerField(min_value=1, required=False, default=1)
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False, default=list)

    class Meta:
        model = Product
        fields = ["name", "description", "price", "currency", "stock_quantity", "condition", "tags"]

    def to_internal_value(self, data):
        # Accept lower-case currency codes
        if hasattr(data, "get") and isinstance(data.get("currency"), str):
            data = data.copy()
            data["currency"] = data["currency"].upper()
        return super().to_internal_value(data)

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Product name is required")
        return value


class ProductUpdateSerializer(ProductCreateSerializer):
    """Seller edit of an existing listing; used with ``partial=True``."""

    stock_quantity = serializers.IntegerField(min_value=0, required=False)


class ProductModerationSerializer(serializers.Serializer):
    admin_notes = serializers.CharField(required=False, allow_blank=True, default="", max_length=1000)


class ProductRejectionSerializer(serializers.Serializer):
    admin_notes = serializers.CharField(required=True, allow_blank=False, max_length=1000)
