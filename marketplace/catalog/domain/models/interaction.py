from django.contrib.auth import get_user_model
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from .catalog import Product


User = get_user_model()


class ProductReview(models.Model):
    """A buyer's rating of an approved listing; one per user and product."""

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="reviews")
    reviewer = models.ForeignKey(User, on_delete=models.CASCADE, related_name="reviews")
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField(max_length=1000)
    # Set when the reviewer has a delivered order for the product
    is_verified_purchase = models.BooleanField(default=False)
    helpful_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["product", "reviewer"], name="unique_product_reviewer"),
        ]
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["product", "-created_at"], name="review_product_created_idx"),
            models.Index(fields=["reviewer", "-created_at"], name="review_reviewer_created_idx"),
            models.Index(fields=["rating"], name="review_rating_idx"),
        ]

    def __str__(self):
        return f"Review by {self.reviewer_id} for {self.product_id}"


class ProductReviewHelpful(models.Model):
    review = models.ForeignKey(ProductReview, on_delete=models.CASCADE, related_name="helpful_votes")
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="helpful_reviews")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ["review", "user"]
        app_label = "marketplace"

    def __str__(self):
        return f"{self.user_id} found review {self.review_id} helpful"


class SavedItem(models.Model):
    """A product bookmarked by a user, with optional private notes."""

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="saved_items")
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="saved_by")
    notes = models.TextField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ["user", "product"]
        ordering = ["-created_at"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["user", "-created_at"], name="saved_item_user_created_idx"),
            models.Index(fields=["product"], name="saved_item_product_idx"),
        ]

    def __str__(self):
        return f"{self.user_id} saved {self.product_id}"
