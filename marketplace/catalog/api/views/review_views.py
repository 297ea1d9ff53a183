from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.serializers import (
    ErrorResponseSerializer,
    HelpfulVoteResponseSerializer,
    MessageResponseSerializer,
    ReviewDetailResponseSerializer,
    ReviewListResponseSerializer,
    ValidationErrorResponseSerializer,
)
from marketplace.api.views.errors import error_response, validation_error_response
from marketplace.catalog.api.serializers import (
    PageQuerySerializer,
    ReviewListQuerySerializer,
    ReviewSerializer,
    ReviewWriteSerializer,
    UserReviewSerializer,
)
from marketplace.services import ReviewService


class ReviewViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self) -> ReviewService:
        return container.review_service()

    def get_permissions(self):
        if self.action == "list":
            return [AllowAny()]
        return super().get_permissions()

    @extend_schema(
        operation_id="reviews_list",
        summary="List a product's reviews",
        description="""
        **What it returns:**
        - Paginated reviews of the product
        - `summary`: average rating (one decimal), total reviews and count per star level
        """,
        parameters=[
            OpenApiParameter(name="rating", type=int, description="Only reviews with this star rating"),
            OpenApiParameter(name="sort", type=str, description="newest (default), oldest, rating or helpful"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 10)"),
        ],
        responses={
            200: OpenApiResponse(response=ReviewListResponseSerializer, description="Reviews retrieved"),
            400: OpenApiResponse(response=ValidationErrorResponseSerializer, description="Invalid query"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Marketplace - Reviews"],
    )
    def list(self, request, product_id=None):
        query = ReviewListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return validation_error_response(query.errors)

        params = query.validated_data
        result = self.get_service().list_product_reviews(
            product_id,
            page=params["page"],
            page_size=params["page_size"],
            rating=params.get("rating"),
            sort=params["sort"],
        )
        if not result.ok:
            return error_response(result)

        return Response(
            {
                "success": True,
                "data": {
                    "reviews": ReviewSerializer(result.value["reviews"], many=True).data,
                    "pagination": result.value["pagination"],
                    "summary": result.value["summary"],
                },
            }
        )

    @extend_schema(
        operation_id="reviews_create",
        summary="Review a product",
        description="""
        **What it receives:**
        - `product_id` (UUID in URL): Approved product to review
        - `rating` (1-5)
        - `comment` (10-1000 characters)

        One review per user and product.
        """,
        request=ReviewWriteSerializer,
        responses={
            201: OpenApiResponse(response=ReviewDetailResponseSerializer, description="Review created"),
            400: OpenApiResponse(
                response=ValidationErrorResponseSerializer,
                description="Validation error, product not approved or already reviewed",
            ),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Marketplace - Reviews"],
    )
    def create(self, request, product_id=None):
        serializer = ReviewWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        data = serializer.validated_data
        result = self.get_service().create_review(request.user, product_id, data["rating"], data["comment"])
        if not result.ok:
            return error_response(result)

        return Response(
            {"success": True, "message": "Review created successfully", "data": ReviewSerializer(result.value).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        operation_id="reviews_update",
        summary="Update my review",
        description="PUT replaces rating and comment; PATCH may send either.",
        request=ReviewWriteSerializer,
        responses={
            200: OpenApiResponse(response=ReviewDetailResponseSerializer, description="Review updated"),
            400: OpenApiResponse(response=ValidationErrorResponseSerializer, description="Validation error"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not your review"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Review not found"),
        },
        tags=["Marketplace - Reviews"],
    )
    def update(self, request, pk=None):
        serializer = ReviewWriteSerializer(data=request.data, partial=request.method == "PATCH")
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        data = serializer.validated_data
        result = self.get_service().update_review(
            request.user, pk, rating=data.get("rating"), comment=data.get("comment")
        )
        if not result.ok:
            return error_response(result)

        return Response(
            {"success": True, "message": "Review updated successfully", "data": ReviewSerializer(result.value).data}
        )

    @extend_schema(
        operation_id="reviews_destroy",
        summary="Delete my review",
        description="Admins may delete any review.",
        request=None,
        responses={
            200: OpenApiResponse(response=MessageResponseSerializer, description="Review deleted"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not your review"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Review not found"),
        },
        tags=["Marketplace - Reviews"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().delete_review(request.user, pk)
        if not result.ok:
            return error_response(result)

        return Response({"success": True, "message": "Review deleted successfully"})

    @extend_schema(
        operation_id="reviews_helpful",
        summary="Toggle my helpful vote on a review",
        request=None,
        responses={
            200: OpenApiResponse(response=HelpfulVoteResponseSerializer, description="Vote toggled"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Own review"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Review not found"),
        },
        tags=["Marketplace - Reviews"],
    )
    @action(detail=True, methods=["post"])
    def helpful(self, request, pk=None):
        result = self.get_service().toggle_helpful(request.user, pk)
        if not result.ok:
            return error_response(result)

        message = "Marked as helpful" if result.value["is_helpful"] else "Removed helpful vote"
        return Response({"success": True, "message": message, "data": result.value})

    @extend_schema(
        operation_id="reviews_mine",
        summary="List my reviews",
        parameters=[
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 10)"),
        ],
        responses={
            200: OpenApiResponse(response=ReviewListResponseSerializer, description="Reviews retrieved"),
            400: OpenApiResponse(response=ValidationErrorResponseSerializer, description="Invalid query"),
        },
        tags=["Marketplace - Reviews"],
    )
    @action(detail=False, methods=["get"], url_path="my-reviews")
    def my_reviews(self, request):
        query = PageQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return validation_error_response(query.errors)

        result = self.get_service().list_user_reviews(
            request.user, page=query.validated_data["page"], page_size=query.validated_data["page_size"]
        )
        if not result.ok:
            return error_response(result)

        return Response(
            {
                "success": True,
                "data": {
                    "reviews": UserReviewSerializer(result.value["reviews"], many=True).data,
                    "pagination": result.value["pagination"],
                },
            }
        )
