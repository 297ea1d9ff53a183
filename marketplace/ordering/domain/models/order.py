import uuid

from django.contrib.auth import get_user_model
from django.core.validators import MinValueValidator
from django.db import models

from marketplace.catalog.domain.models.catalog import Product
from marketplace.ordering.domain import lifecycle

User = get_user_model()


class Order(models.Model):
    """One buyer purchasing one product from its seller."""

    STATUS_CHOICES = [
        (lifecycle.PENDING, "Pending"),
        (lifecycle.CONFIRMED, "Confirmed"),
        (lifecycle.SHIPPED, "Shipped"),
        (lifecycle.DELIVERED, "Delivered"),
        (lifecycle.CANCELLED, "Cancelled"),
        (lifecycle.REFUNDED, "Refunded"),
    ]

    PAYMENT_METHOD_CHOICES = [
        ("credit_card", "Credit Card"),
        ("card", "Card"),
        ("paypal", "PayPal"),
        ("bank_transfer", "Bank Transfer"),
        ("cash_on_delivery", "Cash on Delivery"),
    ]

    PAYMENT_STATUS_CHOICES = [
        ("pending", "Pending"),
        ("paid", "Paid"),
        ("failed", "Failed"),
        ("refunded", "Refunded"),
    ]

    SHIPPING_METHOD_CHOICES = [
        ("standard", "Standard"),
        ("express", "Express"),
        ("overnight", "Overnight"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    buyer = models.ForeignKey(User, on_delete=models.CASCADE, related_name="orders")
    seller = models.ForeignKey(User, on_delete=models.CASCADE, related_name="sales")
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name="orders")

    # Pricing snapshot, frozen at creation
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    currency = models.CharField(max_length=3, default="USD")
    shipping_cost = models.DecimalField(max_digits=10, decimal_places=2)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)

    # Payment (stored only)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default="pending")

    # Fulfillment
    shipping_address = models.JSONField()
    shipping_method = models.CharField(max_length=20, choices=SHIPPING_METHOD_CHOICES, default="standard")
    tracking_number = models.CharField(max_length=50, blank=True)
    estimated_delivery = models.DateField(null=True, blank=True)
    notes = models.TextField(max_length=500, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=lifecycle.PENDING)

    # Cancellation
    cancellation_reason = models.TextField(blank=True)
    cancelled_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="cancelled_orders"
    )
    cancelled_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["buyer", "-created_at"], name="order_buyer_created_idx"),
            models.Index(fields=["seller", "-created_at"], name="order_seller_created_idx"),
            models.Index(fields=["status"], name="order_status_idx"),
        ]

    @property
    def valid_transitions(self):
        return lifecycle.allowed_transitions(self.status) or []

    @property
    def can_cancel(self) -> bool:
        return self.status in lifecycle.CANCELLABLE_STATUSES

    def __str__(self):
        return f"Order {str(self.id)[:8]} by {self.buyer_id}"
