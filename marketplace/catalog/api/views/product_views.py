from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from authentication.permissions import AdminRequired, SellerRequired
from infrastructure.container import container
from marketplace.api.serializers import (
    DashboardResponseSerializer,
    ErrorResponseSerializer,
    MessageResponseSerializer,
    ProductDetailResponseSerializer,
    ProductListResponseSerializer,
    ValidationErrorResponseSerializer,
)
from marketplace.api.views.errors import error_response, validation_error_response
from marketplace.catalog.api.serializers import (
    ProductCreateSerializer,
    ProductDetailSerializer,
    ProductListSerializer,
    ProductModerationSerializer,
    ProductRejectionSerializer,
    ProductUpdateSerializer,
)
from marketplace.catalog.domain.models.catalog import Product
from marketplace.services import CatalogService


class ProductListQuerySerializer(serializers.Serializer):
    condition = serializers.ChoiceField(choices=Product.CONDITION_CHOICES, required=False)
    seller = serializers.UUIDField(required=False)
    min_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    max_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    search = serializers.CharField(required=False, max_length=100)
    ordering = serializers.ChoiceField(choices=CatalogService.ALLOWED_ORDERINGS, required=False, default="-created_at")
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    page_size = serializers.IntegerField(min_value=1, max_value=100, required=False)


class AdminProductListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Product.STATUS_CHOICES, required=False)
    seller = serializers.UUIDField(required=False)
    search = serializers.CharField(required=False, max_length=100)
    ordering = serializers.ChoiceField(choices=CatalogService.ALLOWED_ORDERINGS, required=False, default="-created_at")
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    page_size = serializers.IntegerField(min_value=1, max_value=100, required=False, default=20)


class ProductViewSet(viewsets.ViewSet):
    """Public browsing of approved listings plus seller listing management."""

    def get_service(self) -> CatalogService:
        return container.catalog_service()

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [AllowAny()]
        return [IsAuthenticated(), SellerRequired()]

    @extend_schema(
        operation_id="products_list",
        summary="List approved products",
        parameters=[
            OpenApiParameter(name="condition", type=str, description="new, like_new, used or refurbished"),
            OpenApiParameter(name="seller", type=str, description="Seller UUID"),
            OpenApiParameter(name="min_price", type=float, description="Minimum price"),
            OpenApiParameter(name="max_price", type=float, description="Maximum price"),
            OpenApiParameter(name="search", type=str, description="Match in name or description"),
            OpenApiParameter(name="ordering", type=str, description="-created_at, created_at, price, -price"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 20)"),
        ],
        responses={
            200: OpenApiResponse(response=ProductListResponseSerializer, description="Products retrieved"),
            400: OpenApiResponse(response=ValidationErrorResponseSerializer, description="Invalid query"),
        },
        tags=["Marketplace - Products"],
    )
    def list(self, request):
        query = ProductListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return validation_error_response(query.errors)

        params = dict(query.validated_data)
        page = params.pop("page")
        page_size = params.pop("page_size", None)
        ordering = params.pop("ordering")

        result = self.get_service().list_products(filters=params, page=page, page_size=page_size, ordering=ordering)
        if not result.ok:
            return error_response(result)

        return Response(
            {
                "success": True,
                "data": {
                    "products": ProductListSerializer(result.value["products"], many=True).data,
                    "pagination": result.value["pagination"],
                },
            }
        )

    @extend_schema(
        operation_id="products_retrieve",
        summary="Get product details",
        description="Approved products are public; pending or rejected ones are visible to their seller and admins.",
        responses={
            200: OpenApiResponse(response=ProductDetailResponseSerializer, description="Product retrieved"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Marketplace - Products"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_product(pk, user=request.user)
        if not result.ok:
            return error_response(result)

        return Response({"success": True, "data": ProductDetailSerializer(result.value).data})

    @extend_schema(
        operation_id="products_create",
        summary="Create a listing (seller only)",
        description="New listings are created in `pending` status and wait for admin approval.",
        request=ProductCreateSerializer,
        responses={
            201: OpenApiResponse(response=ProductDetailResponseSerializer, description="Listing created"),
            400: OpenApiResponse(response=ValidationErrorResponseSerializer, description="Validation error"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Seller role required"),
        },
        tags=["Marketplace - Products"],
    )
    def create(self, request):
        serializer = ProductCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().create_product(serializer.validated_data, request.user)
        if not result.ok:
            return error_response(result)

        return Response(
            {
                "success": True,
                "message": "Product submitted for approval",
                "data": ProductDetailSerializer(result.value).data,
            },
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        operation_id="products_update",
        summary="Edit my listing (seller only)",
        description="Any edit sends the listing back to `pending` for re-approval.",
        request=ProductUpdateSerializer,
        responses={
            200: OpenApiResponse(response=ProductDetailResponseSerializer, description="Listing updated"),
            400: OpenApiResponse(response=ValidationErrorResponseSerializer, description="Validation error"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not your listing"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Marketplace - Products"],
    )
    def update(self, request, pk=None):
        serializer = ProductUpdateSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().update_product(pk, serializer.validated_data, request.user)
        if not result.ok:
            return error_response(result)

        return Response(
            {
                "success": True,
                "message": "Product updated successfully and sent for re-approval",
                "data": ProductDetailSerializer(result.value).data,
            }
        )

    @extend_schema(
        operation_id="products_destroy",
        summary="Delete my listing (seller only)",
        description="Listings that already have orders are deactivated instead of removed.",
        request=None,
        responses={
            200: OpenApiResponse(response=MessageResponseSerializer, description="Listing deleted or deactivated"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not your listing"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Marketplace - Products"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().delete_product(pk, request.user)
        if not result.ok:
            return error_response(result)

        if result.value == "deactivated":
            message = "Product has existing orders and was deactivated instead"
        else:
            message = "Product deleted successfully"

        return Response({"success": True, "message": message})

    @extend_schema(
        operation_id="products_my_products",
        summary="List my listings (seller only)",
        parameters=[OpenApiParameter(name="status", type=str, description="pending, approved, rejected or inactive")],
        responses={200: ProductDetailSerializer(many=True)},
        tags=["Marketplace - Products"],
    )
    @action(detail=False, methods=["get"], url_path="my-products")
    def my_products(self, request):
        result = self.get_service().list_seller_products(request.user, status=request.query_params.get("status"))
        if not result.ok:
            return error_response(result)

        return Response({"success": True, "data": ProductDetailSerializer(result.value, many=True).data})


class AdminProductViewSet(viewsets.ViewSet):
    """Admin review queue, catalog-wide listing and dashboard."""

    permission_classes = [IsAuthenticated, AdminRequired]

    def get_service(self) -> CatalogService:
        return container.catalog_service()

    @extend_schema(
        operation_id="admin_products_pending",
        summary="List listings awaiting review",
        parameters=[
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 10)"),
        ],
        responses={
            200: OpenApiResponse(response=ProductListResponseSerializer, description="Pending products"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Admin privileges required"),
        },
        tags=["Marketplace - Admin"],
    )
    @action(detail=False, methods=["get"])
    def pending(self, request):
        try:
            page = max(int(request.query_params.get("page", 1)), 1)
            page_size = min(max(int(request.query_params.get("page_size", 10)), 1), 100)
        except ValueError:
            return validation_error_response({"page": ["page and page_size must be integers"]})

        result = self.get_service().list_pending(page=page, page_size=page_size)
        if not result.ok:
            return error_response(result)

        return Response(
            {
                "success": True,
                "data": {
                    "products": ProductDetailSerializer(result.value["products"], many=True).data,
                    "pagination": result.value["pagination"],
                },
            }
        )

    @extend_schema(
        operation_id="admin_products_dashboard",
        summary="Catalog dashboard statistics",
        responses={
            200: OpenApiResponse(response=DashboardResponseSerializer, description="Dashboard statistics"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Admin privileges required"),
        },
        tags=["Marketplace - Admin"],
    )
    @action(detail=False, methods=["get"])
    def dashboard(self, request):
        result = self.get_service().get_dashboard_stats()
        if not result.ok:
            return error_response(result)

        return Response(
            {
                "success": True,
                "data": {
                    "stats": result.value["stats"],
                    "recent_products": ProductDetailSerializer(result.value["recent_products"], many=True).data,
                },
            }
        )

    @extend_schema(
        operation_id="admin_products_all",
        summary="List all listings in any status",
        parameters=[
            OpenApiParameter(name="status", type=str, description="pending, approved, rejected or inactive"),
            OpenApiParameter(name="seller", type=str, description="Seller UUID"),
            OpenApiParameter(name="search", type=str, description="Match in name or description"),
            OpenApiParameter(name="ordering", type=str, description="-created_at, created_at, price, -price"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 20)"),
        ],
        responses={
            200: OpenApiResponse(response=ProductListResponseSerializer, description="Products retrieved"),
            400: OpenApiResponse(response=ValidationErrorResponseSerializer, description="Invalid query"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Admin privileges required"),
        },
        tags=["Marketplace - Admin"],
    )
    @action(detail=False, methods=["get"], url_path="all")
    def all_products(self, request):
        query = AdminProductListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return validation_error_response(query.errors)

        params = dict(query.validated_data)
        page = params.pop("page")
        page_size = params.pop("page_size")
        ordering = params.pop("ordering")

        result = self.get_service().list_all_products(filters=params, page=page, page_size=page_size, ordering=ordering)
        if not result.ok:
            return error_response(result)

        return Response(
            {
                "success": True,
                "data": {
                    "products": ProductDetailSerializer(result.value["products"], many=True).data,
                    "pagination": result.value["pagination"],
                },
            }
        )

    @extend_schema(
        operation_id="admin_products_approve",
        summary="Approve a listing",
        request=ProductModerationSerializer,
        responses={
            200: OpenApiResponse(response=ProductDetailResponseSerializer, description="Product approved"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Admin privileges required"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Marketplace - Admin"],
    )
    @action(detail=True, methods=["post", "put"])
    def approve(self, request, pk=None):
        serializer = ProductModerationSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().approve_product(pk, request.user, serializer.validated_data["admin_notes"])
        if not result.ok:
            return error_response(result)

        return Response(
            {
                "success": True,
                "message": "Product approved successfully",
                "data": ProductDetailSerializer(result.value).data,
            }
        )

    @extend_schema(
        operation_id="admin_products_reject",
        summary="Reject a listing",
        description="`admin_notes` explaining the rejection are required.",
        request=ProductRejectionSerializer,
        responses={
            200: OpenApiResponse(response=ProductDetailResponseSerializer, description="Product rejected"),
            400: OpenApiResponse(response=ValidationErrorResponseSerializer, description="Admin notes missing"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Admin privileges required"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Marketplace - Admin"],
    )
    @action(detail=True, methods=["post", "put"])
    def reject(self, request, pk=None):
        serializer = ProductRejectionSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().reject_product(pk, request.user, serializer.validated_data["admin_notes"])
        if not result.ok:
            return error_response(result)

        return Response(
            {
                "success": True,
                "message": "Product rejected successfully",
                "data": ProductDetailSerializer(result.value).data,
            }
        )
