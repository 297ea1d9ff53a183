"""
ReviewService - Product Review Management

Handles listing, create, update, delete, and helpful voting for product
reviews. A review is flagged as a verified purchase when the reviewer has a
delivered order for the product.
"""

import logging
from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from authentication.permissions import ROLE_ADMIN, user_has_role
from marketplace.catalog.domain.models.catalog import Product
from marketplace.catalog.domain.models.interaction import ProductReview, ProductReviewHelpful
from marketplace.infra.observability.metrics import review_actions_total
from marketplace.ordering.domain import lifecycle
from marketplace.ordering.domain.models.order import Order

from .base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok
from .review_metrics_service import ReviewMetricsService

User = get_user_model()
logger = logging.getLogger(__name__)


class ReviewService(BaseService):
    """
    Service for managing product reviews.

    Responsibilities:
    - List a product's reviews with its rating summary
    - Create review (one per user and product, approved listings only)
    - Update / delete own review (admins may delete any)
    - Toggle helpful vote

    Dependencies:
    - ReviewMetricsService: Rating summary shown alongside the list
    """

    SORT_OPTIONS = {
        "newest": ["-created_at"],
        "oldest": ["created_at"],
        "rating": ["-rating", "-created_at"],
        "helpful": ["-helpful_count", "-created_at"],
    }

    def __init__(self, review_metrics_service: ReviewMetricsService = None):
        """
        Initialize ReviewService.

        Args:
            review_metrics_service: Service for metrics calculations (injected)
        """
        super().__init__()
        self.review_metrics_service = review_metrics_service or ReviewMetricsService()

    @BaseService.log_performance
    def list_product_reviews(
        self,
        product_id: str,
        page: int = 1,
        page_size: int = 10,
        rating: Optional[int] = None,
        sort: str = "newest",
    ) -> ServiceResult[Dict[str, Any]]:
        """
        List reviews for a product with pagination.

        Returns:
            ServiceResult with {"reviews": [...], "pagination": {...}, "summary": {...}}
        """
        try:
            if not Product.objects.filter(id=product_id).exists():
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, "Product not found")

            queryset = ProductReview.objects.select_related("reviewer").filter(product_id=product_id)
            if rating is not None:
                queryset = queryset.filter(rating=rating)

            order_by = self.SORT_OPTIONS.get(sort, self.SORT_OPTIONS["newest"])
            reviews, pagination = paginate(queryset.order_by(*order_by), page, page_size)

            summary = self.review_metrics_service.get_summary(product_id)
            if not summary.ok:
                return summary

            return service_ok({"reviews": reviews, "pagination": pagination, "summary": summary.value})

        except Exception as e:
            self.logger.error(f"Error listing reviews: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def create_review(self, user: User, product_id: str, rating: int, comment: str) -> ServiceResult[ProductReview]:
        """
        Create a new review for a product.

        Validates:
        - Product exists and is approved
        - User hasn't already reviewed the product
        - Rating is valid (1-5)
        """
        try:
            if not (1 <= rating <= 5):
                return service_err(ErrorCodes.VALIDATION_ERROR, "Rating must be between 1 and 5")

            try:
                product = Product.objects.get(id=product_id)
            except Product.DoesNotExist:
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, "Product not found")

            if product.status != Product.STATUS_APPROVED:
                return service_err(ErrorCodes.PRODUCT_NOT_APPROVED, "Cannot review unapproved products")

            if ProductReview.objects.filter(product=product, reviewer=user).exists():
                return service_err(ErrorCodes.DUPLICATE_REVIEW, "You have already reviewed this product")

            is_verified = Order.objects.filter(buyer=user, product=product, status=lifecycle.DELIVERED).exists()

            try:
                with transaction.atomic():
                    review = ProductReview.objects.create(
                        product=product,
                        reviewer=user,
                        rating=rating,
                        comment=comment,
                        is_verified_purchase=is_verified,
                    )
            except IntegrityError:
                # Lost a race with a concurrent submission from the same user
                return service_err(ErrorCodes.DUPLICATE_REVIEW, "You have already reviewed this product")

            review_actions_total.labels(action="created").inc()
            self.logger.info(f"Created review {review.id} for product {product.id} by user {user.id}")

            return service_ok(review)

        except Exception as e:
            self.logger.error(f"Error creating review: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def update_review(
        self, user: User, review_id: int, rating: Optional[int] = None, comment: Optional[str] = None
    ) -> ServiceResult[ProductReview]:
        """Update rating and/or comment of the caller's own review."""
        try:
            try:
                review = ProductReview.objects.select_related("reviewer").get(id=review_id)
            except ProductReview.DoesNotExist:
                return service_err(ErrorCodes.REVIEW_NOT_FOUND, "Review not found")

            if review.reviewer_id != user.pk:
                return service_err(ErrorCodes.NOT_REVIEW_OWNER, "You can only update your own reviews")

            if rating is not None:
                if not (1 <= rating <= 5):
                    return service_err(ErrorCodes.VALIDATION_ERROR, "Rating must be between 1 and 5")
                review.rating = rating

            if comment is not None:
                review.comment = comment

            review.save(update_fields=["rating", "comment", "updated_at"])

            review_actions_total.labels(action="updated").inc()
            self.logger.info(f"Updated review {review.id}")

            return service_ok(review)

        except Exception as e:
            self.logger.error(f"Error updating review: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def delete_review(self, user: User, review_id: int) -> ServiceResult[bool]:
        """Delete a review. Only its author or an admin may do so."""
        try:
            try:
                review = ProductReview.objects.get(id=review_id)
            except ProductReview.DoesNotExist:
                return service_err(ErrorCodes.REVIEW_NOT_FOUND, "Review not found")

            if review.reviewer_id != user.pk and not user_has_role(user, ROLE_ADMIN):
                return service_err(ErrorCodes.NOT_REVIEW_OWNER, "You can only delete your own reviews")

            review.delete()

            review_actions_total.labels(action="deleted").inc()
            self.logger.info(f"Deleted review {review_id} by user {user.id}")

            return service_ok(True)

        except Exception as e:
            self.logger.error(f"Error deleting review: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def toggle_helpful(self, user: User, review_id: int) -> ServiceResult[Dict[str, Any]]:
        """
        Toggle the caller's helpful vote on a review.

        Returns:
            ServiceResult with {"helpful_count": int, "is_helpful": bool}
        """
        try:
            with transaction.atomic():
                try:
                    review = ProductReview.objects.select_for_update().get(id=review_id)
                except ProductReview.DoesNotExist:
                    return service_err(ErrorCodes.REVIEW_NOT_FOUND, "Review not found")

                if review.reviewer_id == user.pk:
                    return service_err(ErrorCodes.PERMISSION_DENIED, "You cannot vote on your own review")

                vote, created = ProductReviewHelpful.objects.get_or_create(review=review, user=user)
                if created:
                    review.helpful_count += 1
                else:
                    vote.delete()
                    review.helpful_count = max(0, review.helpful_count - 1)

                review.save(update_fields=["helpful_count"])

            review_actions_total.labels(action="helpful_added" if created else "helpful_removed").inc()
            self.logger.info(f"User {user.id} helpful vote for review {review.id}: {created}")

            return service_ok({"helpful_count": review.helpful_count, "is_helpful": created})

        except Exception as e:
            self.logger.error(f"Error toggling helpful vote: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def list_user_reviews(self, user: User, page: int = 1, page_size: int = 10) -> ServiceResult[Dict[str, Any]]:
        try:
            queryset = ProductReview.objects.select_related("product", "reviewer").filter(reviewer=user)
            reviews, pagination = paginate(queryset.order_by("-created_at"), page, page_size)
            return service_ok({"reviews": reviews, "pagination": pagination})
        except Exception as e:
            self.logger.error(f"Error listing reviews of user {user.id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))
