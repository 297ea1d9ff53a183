import logging

from django.contrib.auth import get_user_model
from django.db import models

User = get_user_model()
logger = logging.getLogger(__name__)


class Notification(models.Model):
    """
    A message addressed to a single user.

    Rows are written as a side effect of order and moderation activity and
    are only read, marked read or deleted by their owner.
    """

    TYPE_CHOICES = [
        ("order_created", "Order Created"),
        ("order_confirmed", "Order Confirmed"),
        ("order_shipped", "Order Shipped"),
        ("order_delivered", "Order Delivered"),
        ("order_cancelled", "Order Cancelled"),
        ("order_refunded", "Order Refunded"),
        ("product_approved", "Product Approved"),
        ("product_rejected", "Product Rejected"),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="notifications")
    type = models.CharField(max_length=30, choices=TYPE_CHOICES)
    title = models.CharField(max_length=100)
    message = models.CharField(max_length=500)
    is_read = models.BooleanField(default=False)

    related_order = models.ForeignKey(
        "marketplace.Order", on_delete=models.SET_NULL, null=True, blank=True, related_name="notifications"
    )
    related_product = models.ForeignKey(
        "marketplace.Product", on_delete=models.SET_NULL, null=True, blank=True, related_name="notifications"
    )
    metadata = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "is_read", "-created_at"], name="notif_user_read_created_idx"),
            models.Index(fields=["type", "-created_at"], name="notif_type_created_idx"),
        ]

    def __str__(self):
        return f"{self.user_id} - {self.type} - {self.title}"
