import uuid

from django.contrib.auth import get_user_model
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

User = get_user_model()


class Product(models.Model):
    """A seller's listing. Only approved listings can be ordered."""

    CONDITION_CHOICES = [
        ("new", "New"),
        ("like_new", "Like New"),
        ("used", "Used"),
        ("refurbished", "Refurbished"),
    ]

    STATUS_PENDING = "pending"
    STATUS_APPROVED = "approved"
    STATUS_REJECTED = "rejected"
    STATUS_INACTIVE = "inactive"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending Review"),
        (STATUS_APPROVED, "Approved"),
        (STATUS_REJECTED, "Rejected"),
        (STATUS_INACTIVE, "Inactive"),
    ]

    CURRENCY_CHOICES = [
        ("USD", "US Dollar"),
        ("GBP", "British Pound"),
        ("EUR", "Euro"),
    ]

    # Basic Information
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(max_length=2000, blank=True)

    seller = models.ForeignKey(User, on_delete=models.CASCADE, related_name="products")

    # Pricing and Inventory
    price = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(0.01), MaxValueValidator(100000)]
    )
    currency = models.CharField(max_length=3, choices=CURRENCY_CHOICES, default="USD")
    stock_quantity = models.PositiveIntegerField(default=1)

    condition = models.CharField(max_length=20, choices=CONDITION_CHOICES, default="new")
    tags = models.JSONField(default=list, blank=True, help_text="Product tags")

    # Moderation
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    admin_notes = models.TextField(blank=True)
    approved_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="moderated_products"
    )
    approved_at = models.DateTimeField(null=True, blank=True)

    is_featured = models.BooleanField(default=False)
    view_count = models.PositiveIntegerField(default=0)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["seller", "status"], name="product_seller_status_idx"),
            models.Index(fields=["status", "-created_at"], name="product_status_created_idx"),
            models.Index(fields=["price", "status"], name="product_price_status_idx"),
            models.Index(fields=["condition", "status"], name="product_condition_status_idx"),
            models.Index(fields=["is_featured", "status"], name="product_featured_status_idx"),
        ]

    def save(self, *args, **kwargs):
        if self.currency:
            self.currency = self.currency.upper()
        super().save(*args, **kwargs)

    @property
    def is_approved(self) -> bool:
        return self.status == self.STATUS_APPROVED

    def __str__(self):
        return self.name
