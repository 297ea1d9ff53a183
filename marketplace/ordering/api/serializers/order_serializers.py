from rest_framework import serializers

from authentication.api.serializers import MinimalUserSerializer
from marketplace.catalog.api.serializers.product_serializers import ProductSummarySerializer
from marketplace.ordering.domain import lifecycle
from marketplace.ordering.domain.models.order import Order


PHONE_REGEX = r"^\+?[0-9\s\-().]{7,20}$"


class OrderSerializer(serializers.ModelSerializer):
    buyer = MinimalUserSerializer(read_only=True)
    seller = MinimalUserSerializer(read_only=True)
    product = ProductSummarySerializer(read_only=True)
    cancelled_by = serializers.PrimaryKeyRelatedField(read_only=True)
    valid_transitions = serializers.ListField(child=serializers.CharField(), read_only=True)
    can_cancel = serializers.BooleanField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "buyer",
            "seller",
            "product",
            "quantity",
            "unit_price",
            "currency",
            "shipping_cost",
            "total_amount",
            "payment_method",
            "payment_status",
            "shipping_address",
            "shipping_method",
            "tracking_number",
            "estimated_delivery",
            "notes",
            "status",
            "valid_transitions",
            "can_cancel",
            "cancellation_reason",
            "cancelled_by",
            "cancelled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ShippingAddressSerializer(serializers.Serializer):
    street = serializers.CharField(min_length=5, max_length=100)
    city = serializers.CharField(min_length=2, max_length=50)
    state = serializers.CharField(min_length=2, max_length=50)
    zip_code = serializers.CharField(min_length=3, max_length=10)
    country = serializers.CharField(min_length=2, max_length=50)
    phone = serializers.RegexField(
        PHONE_REGEX, max_length=20, error_messages={"invalid": "Invalid phone number"}
    )


class CreateOrderSerializer(serializers.Serializer):
    """Purchase request body; the buyer and product come from the request itself."""

    quantity = serializers.IntegerField(
        min_value=1, max_value=lifecycle.MAX_ORDER_QUANTITY, required=False, default=1
    )
    payment_method = serializers.ChoiceField(
        choices=lifecycle.PAYMENT_METHODS, error_messages={"invalid_choice": "Invalid payment method"}
    )
    shipping_address = ShippingAddressSerializer()
    # Unrecognised methods are charged and stored as standard shipping
    shipping_method = serializers.CharField(
        required=False, allow_blank=True, max_length=20, default=lifecycle.DEFAULT_SHIPPING_METHOD
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="", max_length=500)


class UpdateOrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=lifecycle.ORDER_STATUSES, error_messages={"invalid_choice": "Invalid order status"}
    )
    tracking_number = serializers.CharField(required=False, min_length=5, max_length=50)
    estimated_delivery = serializers.DateField(required=False, input_formats=["iso-8601"])


class CancelOrderSerializer(serializers.Serializer):
    reason = serializers.CharField(
        min_length=10,
        max_length=200,
        trim_whitespace=True,
        error_messages={
            "min_length": "Cancellation reason must be between 10 and 200 characters",
            "max_length": "Cancellation reason must be between 10 and 200 characters",
        },
    )


class OrderListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=lifecycle.ORDER_STATUSES, required=False)
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    page_size = serializers.IntegerField(min_value=1, max_value=100, required=False)
