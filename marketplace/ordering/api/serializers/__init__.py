from .order_serializers import (
    CancelOrderSerializer,
    CreateOrderSerializer,
    OrderListQuerySerializer,
    OrderSerializer,
    ShippingAddressSerializer,
    UpdateOrderStatusSerializer,
)


__all__ = [
    "CancelOrderSerializer",
    "CreateOrderSerializer",
    "OrderListQuerySerializer",
    "OrderSerializer",
    "ShippingAddressSerializer",
    "UpdateOrderStatusSerializer",
]
