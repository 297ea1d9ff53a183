"""
Order lifecycle tables.

Fixed lookups consulted by OrderService: shipping rate per method, the
statuses reachable from each status in a single transition, and the buyer
notification type emitted when an order enters a status.
"""

from decimal import Decimal
from types import MappingProxyType

PENDING = "pending"
CONFIRMED = "confirmed"
SHIPPED = "shipped"
DELIVERED = "delivered"
CANCELLED = "cancelled"
REFUNDED = "refunded"

ORDER_STATUSES = (PENDING, CONFIRMED, SHIPPED, DELIVERED, CANCELLED, REFUNDED)

# Per-order cap: 100000 x 1000 plus shipping fits Order.total_amount
MAX_ORDER_QUANTITY = 1000

DEFAULT_SHIPPING_METHOD = "standard"

SHIPPING_COSTS = MappingProxyType(
    {
        "standard": Decimal("5.99"),
        "express": Decimal("12.99"),
        "overnight": Decimal("24.99"),
    }
)

PAYMENT_METHODS = ("credit_card", "card", "paypal", "bank_transfer", "cash_on_delivery")

REQUIRED_ADDRESS_FIELDS = ("street", "city", "state", "zip_code", "country", "phone")

VALID_TRANSITIONS = MappingProxyType(
    {
        PENDING: frozenset({CONFIRMED, CANCELLED}),
        CONFIRMED: frozenset({SHIPPED, CANCELLED}),
        SHIPPED: frozenset({DELIVERED}),
        DELIVERED: frozenset({REFUNDED}),
        CANCELLED: frozenset(),
        REFUNDED: frozenset(),
    }
)

STATUS_NOTIFICATION_TYPES = MappingProxyType(
    {
        CONFIRMED: "order_confirmed",
        SHIPPED: "order_shipped",
        DELIVERED: "order_delivered",
        CANCELLED: "order_cancelled",
        REFUNDED: "order_refunded",
    }
)

CANCELLABLE_STATUSES = frozenset({PENDING, CONFIRMED})


def shipping_cost_for(method) -> Decimal:
    """Rate for a shipping method; unknown or missing methods pay the standard rate."""
    return SHIPPING_COSTS.get(method or DEFAULT_SHIPPING_METHOD, SHIPPING_COSTS[DEFAULT_SHIPPING_METHOD])


def order_total(unit_price: Decimal, quantity: int, shipping_cost: Decimal) -> Decimal:
    return Decimal(unit_price) * quantity + Decimal(shipping_cost)


def allowed_transitions(status: str):
    """Sorted list of statuses reachable from ``status``; None if the status is unknown."""
    targets = VALID_TRANSITIONS.get(status)
    if targets is None:
        return None
    return sorted(targets, key=ORDER_STATUSES.index)


def can_transition(current: str, target: str) -> bool:
    return target in VALID_TRANSITIONS.get(current, frozenset())


def missing_address_fields(address) -> list:
    if not isinstance(address, dict):
        return list(REQUIRED_ADDRESS_FIELDS)
    return [name for name in REQUIRED_ADDRESS_FIELDS if not str(address.get(name) or "").strip()]
