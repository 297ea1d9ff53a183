"""
ReviewMetricsService - Review Aggregations

Average rating, star breakdown and review count for a product, computed
straight from the review table on every call.
"""

import logging
from typing import Any, Dict

from django.db.models import Avg, Count

from marketplace.catalog.domain.models.interaction import ProductReview

from .base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

logger = logging.getLogger(__name__)


class ReviewMetricsService(BaseService):
    """
    Service for calculating product review metrics.

    Responsibilities:
    - Calculate average ratings
    - Get rating distribution (star breakdown)
    - Get review counts
    """

    @BaseService.log_performance
    def calculate_average_rating(self, product_id: str) -> ServiceResult[float]:
        """
        Average rating rounded to one decimal place, or 0 when the product has no reviews.

        Example:
            >>> result = review_metrics_service.calculate_average_rating(product_id)
            >>> if result.ok:
            ...     print(f"Average: {result.value} stars")
        """
        try:
            avg = ProductReview.objects.filter(product_id=product_id).aggregate(Avg("rating"))["rating__avg"]
            return service_ok(round(avg, 1) if avg else 0)
        except Exception as e:
            self.logger.error(f"Error calculating average rating for product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def get_rating_distribution(self, product_id: str) -> ServiceResult[Dict[int, int]]:
        """
        Count of reviews per star level, highest first.

        Example:
            >>> review_metrics_service.get_rating_distribution(product_id).value
            {5: 120, 4: 45, 3: 10, 2: 3, 1: 2}
        """
        try:
            distribution = {5: 0, 4: 0, 3: 0, 2: 0, 1: 0}

            rating_counts = (
                ProductReview.objects.filter(product_id=product_id)
                .values("rating")
                .annotate(count=Count("id"))
                .order_by("rating")
            )
            for item in rating_counts:
                distribution[item["rating"]] = item["count"]

            return service_ok(distribution)

        except Exception as e:
            self.logger.error(f"Error calculating rating distribution for product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    def get_review_count(self, product_id: str) -> ServiceResult[int]:
        try:
            return service_ok(ProductReview.objects.filter(product_id=product_id).count())
        except Exception as e:
            self.logger.error(f"Error getting review count for product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def get_summary(self, product_id: str) -> ServiceResult[Dict[str, Any]]:
        """All three metrics in one block, as shown above a product's review list."""
        average = self.calculate_average_rating(product_id)
        if not average.ok:
            return average
        distribution = self.get_rating_distribution(product_id)
        if not distribution.ok:
            return distribution
        count = self.get_review_count(product_id)
        if not count.ok:
            return count

        return service_ok(
            {
                "average_rating": average.value,
                "total_reviews": count.value,
                "rating_distribution": distribution.value,
            }
        )
