from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from authentication.permissions import SellerRequired
from infrastructure.container import container
from marketplace.api.serializers import (
    ErrorResponseSerializer,
    InvalidTransitionResponseSerializer,
    OrderDetailResponseSerializer,
    OrderListResponseSerializer,
    ValidationErrorResponseSerializer,
)
from marketplace.api.views.errors import error_response, validation_error_response
from marketplace.ordering.api.serializers import (
    CancelOrderSerializer,
    CreateOrderSerializer,
    OrderListQuerySerializer,
    OrderSerializer,
    UpdateOrderStatusSerializer,
)
from marketplace.services import OrderService


LIST_PARAMETERS = [
    OpenApiParameter(name="status", type=str, description="Filter by order status"),
    OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
    OpenApiParameter(name="page_size", type=int, description="Items per page (default: 10)"),
]


class OrderViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self) -> OrderService:
        return container.order_service()

    def get_permissions(self):
        if self.action == "seller_orders":
            return [IsAuthenticated(), SellerRequired()]
        return super().get_permissions()

    @extend_schema(
        operation_id="orders_create",
        summary="Order a product",
        description="""
        **What it receives:**
        - `product_id` (UUID in URL): Approved product to buy
        - `quantity` (int, default 1)
        - `payment_method`: credit_card, card, paypal, bank_transfer or cash_on_delivery
        - `shipping_address`: street, city, state, zip_code, country, phone (all required)
        - `shipping_method` (optional): standard (5.99), express (12.99) or overnight (24.99);
          anything else is charged at the standard rate
        - `notes` (optional, up to 500 characters)

        **What it returns:**
        - The created order in `pending` status
        - Stock is decremented by the ordered quantity and the seller is notified
        """,
        request=CreateOrderSerializer,
        responses={
            201: OpenApiResponse(response=OrderDetailResponseSerializer, description="Order created successfully"),
            400: OpenApiResponse(
                response=ValidationErrorResponseSerializer,
                description="Validation error, product not approved or insufficient stock",
            ),
            401: OpenApiResponse(response=ErrorResponseSerializer, description="Authentication required"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
            500: OpenApiResponse(response=ErrorResponseSerializer, description="Internal server error"),
        },
        tags=["Marketplace - Orders"],
    )
    def create(self, request, product_id=None):
        serializer = CreateOrderSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        data = serializer.validated_data
        result = self.get_service().create_order(
            buyer=request.user,
            product_id=product_id,
            quantity=data["quantity"],
            payment_method=data["payment_method"],
            shipping_address=dict(data["shipping_address"]),
            shipping_method=data["shipping_method"],
            notes=data["notes"],
        )

        if not result.ok:
            return error_response(result)

        return Response(
            {"success": True, "message": "Order created successfully", "data": OrderSerializer(result.value).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        operation_id="orders_buyer_list",
        summary="List my orders (as buyer)",
        description="""
        **What it returns:**
        - Paginated list of orders the current user placed, newest first
        """,
        parameters=LIST_PARAMETERS,
        responses={
            200: OpenApiResponse(response=OrderListResponseSerializer, description="Orders retrieved successfully"),
            400: OpenApiResponse(response=ValidationErrorResponseSerializer, description="Invalid query parameters"),
            500: OpenApiResponse(response=ErrorResponseSerializer, description="Internal server error"),
        },
        tags=["Marketplace - Orders"],
    )
    @action(detail=False, methods=["get"])
    def buyer_orders(self, request):
        return self._list(request, self.get_service().list_buyer_orders)

    @extend_schema(
        operation_id="orders_seller_list",
        summary="List my orders (as seller)",
        description="""
        **What it receives:**
        - Authentication token of a user with the seller role

        **What it returns:**
        - Paginated list of orders placed against the seller's products, newest first
        """,
        parameters=LIST_PARAMETERS,
        responses={
            200: OpenApiResponse(response=OrderListResponseSerializer, description="Orders retrieved successfully"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Seller role required"),
            500: OpenApiResponse(response=ErrorResponseSerializer, description="Internal server error"),
        },
        tags=["Marketplace - Orders"],
    )
    @action(detail=False, methods=["get"])
    def seller_orders(self, request):
        return self._list(request, self.get_service().list_seller_orders)

    def _list(self, request, list_func):
        query = OrderListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return validation_error_response(query.errors)

        params = query.validated_data
        result = list_func(
            request.user, status=params.get("status"), page=params["page"], page_size=params.get("page_size")
        )

        if not result.ok:
            return error_response(result)

        return Response(
            {
                "success": True,
                "data": {
                    "orders": OrderSerializer(result.value["orders"], many=True).data,
                    "pagination": result.value["pagination"],
                },
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        operation_id="orders_retrieve",
        summary="Get order details",
        description="""
        **What it receives:**
        - `order_id` (UUID in URL): Order to retrieve
        - Authentication token (must be the order's buyer or seller)
        """,
        responses={
            200: OpenApiResponse(response=OrderDetailResponseSerializer, description="Order retrieved successfully"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a party to the order"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
            500: OpenApiResponse(response=ErrorResponseSerializer, description="Internal server error"),
        },
        tags=["Marketplace - Orders"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_order(pk, request.user)

        if not result.ok:
            return error_response(result)

        return Response({"success": True, "data": OrderSerializer(result.value).data}, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_update_status",
        summary="Update order status (seller only)",
        description="""
        **What it receives:**
        - `order_id` (UUID in URL)
        - `status`: target status; must be reachable from the current one
          (pending -> confirmed/cancelled, confirmed -> shipped/cancelled,
          shipped -> delivered, delivered -> refunded)
        - `tracking_number` (optional, 5-50 characters)
        - `estimated_delivery` (optional, ISO date)

        **What it returns:**
        - The updated order; the buyer is notified of the new status
        """,
        request=UpdateOrderStatusSerializer,
        responses={
            200: OpenApiResponse(response=OrderDetailResponseSerializer, description="Status updated"),
            400: OpenApiResponse(response=InvalidTransitionResponseSerializer, description="Invalid transition"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the order's seller"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
            500: OpenApiResponse(response=ErrorResponseSerializer, description="Internal server error"),
        },
        tags=["Marketplace - Orders"],
    )
    @action(detail=True, methods=["put"], url_path="status")
    def update_status(self, request, pk=None):
        serializer = UpdateOrderStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        data = serializer.validated_data
        result = self.get_service().update_status(
            pk,
            request.user,
            data["status"],
            tracking_number=data.get("tracking_number"),
            estimated_delivery=data.get("estimated_delivery"),
        )

        if not result.ok:
            return error_response(result)

        return Response(
            {
                "success": True,
                "message": f"Order status updated to {result.value.status}",
                "data": OrderSerializer(result.value).data,
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        operation_id="orders_cancel",
        summary="Cancel order (buyer only)",
        description="""
        **What it receives:**
        - `order_id` (UUID in URL): Order in `pending` or `confirmed` status
        - `reason` (10-200 characters)

        **What it returns:**
        - The cancelled order; stock is restored and the seller is notified
        """,
        request=CancelOrderSerializer,
        responses={
            200: OpenApiResponse(response=OrderDetailResponseSerializer, description="Order cancelled"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Order can no longer be cancelled"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the order's buyer"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
            500: OpenApiResponse(response=ErrorResponseSerializer, description="Internal server error"),
        },
        tags=["Marketplace - Orders"],
    )
    @action(detail=True, methods=["put"])
    def cancel(self, request, pk=None):
        serializer = CancelOrderSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().cancel_order(pk, request.user, serializer.validated_data["reason"])

        if not result.ok:
            return error_response(result)

        return Response(
            {"success": True, "message": "Order cancelled successfully", "data": OrderSerializer(result.value).data},
            status=status.HTTP_200_OK,
        )
