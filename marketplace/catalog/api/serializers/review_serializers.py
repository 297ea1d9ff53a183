from rest_framework import serializers

from marketplace.catalog.domain.models.interaction import ProductReview

from .product_serializers import ProductSummarySerializer


class ReviewSerializer(serializers.ModelSerializer):
    reviewer_id = serializers.UUIDField(source="reviewer.id", read_only=True)
    reviewer_name = serializers.CharField(source="reviewer.display_name", read_only=True)
    product_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = ProductReview
        fields = [
            "id",
            "product_id",
            "reviewer_id",
            "reviewer_name",
            "rating",
            "comment",
            "is_verified_purchase",
            "helpful_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class UserReviewSerializer(ReviewSerializer):
    """A review as listed on its author's own page, with the reviewed product."""

    product = ProductSummarySerializer(read_only=True)

    class Meta(ReviewSerializer.Meta):
        fields = ReviewSerializer.Meta.fields + ["product"]
        read_only_fields = fields


class ReviewWriteSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(min_length=10, max_length=1000, trim_whitespace=True)


class PageQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    page_size = serializers.IntegerField(min_value=1, max_value=100, required=False, default=10)


class ReviewListQuerySerializer(PageQuerySerializer):
    SORT_CHOICES = ["newest", "oldest", "rating", "helpful"]

    rating = serializers.IntegerField(min_value=1, max_value=5, required=False)
    sort = serializers.ChoiceField(choices=SORT_CHOICES, required=False, default="newest")


class HelpfulVoteSerializer(serializers.Serializer):
    helpful_count = serializers.IntegerField()
    is_helpful = serializers.BooleanField()
