from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.serializers import (
    ErrorResponseSerializer,
    MessageResponseSerializer,
    SavedItemCheckResponseSerializer,
    SavedItemDetailResponseSerializer,
    SavedItemListResponseSerializer,
    ValidationErrorResponseSerializer,
)
from marketplace.api.views.errors import error_response, validation_error_response
from marketplace.catalog.api.serializers import PageQuerySerializer, SavedItemNotesSerializer, SavedItemSerializer
from marketplace.services import SavedItemService


class SavedItemViewSet(viewsets.ViewSet):
    """The current user's saved products."""

    permission_classes = [IsAuthenticated]

    def get_service(self) -> SavedItemService:
        return container.saved_item_service()

    @extend_schema(
        operation_id="saved_items_create",
        summary="Save a product",
        request=SavedItemNotesSerializer,
        responses={
            201: OpenApiResponse(response=SavedItemDetailResponseSerializer, description="Product saved"),
            400: OpenApiResponse(
                response=ValidationErrorResponseSerializer, description="Product not approved or already saved"
            ),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Marketplace - Saved Items"],
    )
    def create(self, request, product_id=None):
        serializer = SavedItemNotesSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().save_product(request.user, product_id, serializer.validated_data["notes"])
        if not result.ok:
            return error_response(result)

        return Response(
            {
                "success": True,
                "message": "Product added to saved items",
                "data": SavedItemSerializer(result.value).data,
            },
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        operation_id="saved_items_list",
        summary="List my saved items",
        parameters=[
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 10)"),
        ],
        responses={
            200: OpenApiResponse(response=SavedItemListResponseSerializer, description="Saved items retrieved"),
            400: OpenApiResponse(response=ValidationErrorResponseSerializer, description="Invalid query"),
        },
        tags=["Marketplace - Saved Items"],
    )
    def list(self, request):
        query = PageQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return validation_error_response(query.errors)

        result = self.get_service().list_saved_items(
            request.user, page=query.validated_data["page"], page_size=query.validated_data["page_size"]
        )
        if not result.ok:
            return error_response(result)

        return Response(
            {
                "success": True,
                "data": {
                    "saved_items": SavedItemSerializer(result.value["saved_items"], many=True).data,
                    "pagination": result.value["pagination"],
                },
            }
        )

    @extend_schema(
        operation_id="saved_items_update",
        summary="Update notes on a saved item",
        request=SavedItemNotesSerializer,
        responses={
            200: OpenApiResponse(response=SavedItemDetailResponseSerializer, description="Saved item updated"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not your saved item"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Saved item not found"),
        },
        tags=["Marketplace - Saved Items"],
    )
    def update(self, request, pk=None):
        serializer = SavedItemNotesSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        result = self.get_service().update_notes(request.user, pk, serializer.validated_data["notes"])
        if not result.ok:
            return error_response(result)

        return Response(
            {
                "success": True,
                "message": "Saved item updated successfully",
                "data": SavedItemSerializer(result.value).data,
            }
        )

    @extend_schema(
        operation_id="saved_items_destroy",
        summary="Remove a saved item",
        request=None,
        responses={
            200: OpenApiResponse(response=MessageResponseSerializer, description="Saved item removed"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not your saved item"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Saved item not found"),
        },
        tags=["Marketplace - Saved Items"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().remove(request.user, pk)
        if not result.ok:
            return error_response(result)

        return Response({"success": True, "message": "Product removed from saved items"})

    @extend_schema(
        operation_id="saved_items_check",
        summary="Check whether I saved a product",
        responses={200: OpenApiResponse(response=SavedItemCheckResponseSerializer, description="Saved state")},
        tags=["Marketplace - Saved Items"],
    )
    @action(detail=False, methods=["get"])
    def check(self, request, product_id=None):
        result = self.get_service().check_saved(request.user, product_id)
        if not result.ok:
            return error_response(result)

        saved_item = result.value["saved_item"]
        return Response(
            {
                "success": True,
                "data": {
                    "is_saved": result.value["is_saved"],
                    "saved_item": SavedItemSerializer(saved_item).data if saved_item else None,
                },
            }
        )
