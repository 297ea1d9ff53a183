from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.serializers import ErrorResponseSerializer
from marketplace.api.views.errors import error_response, validation_error_response

from .serializers import (
    NotificationCountResponseSerializer,
    NotificationListQuerySerializer,
    NotificationListResponseSerializer,
    NotificationSerializer,
)
from .services import NotificationService


class NotificationViewSet(viewsets.ViewSet):
    """The current user's notification inbox."""

    permission_classes = [IsAuthenticated]

    def get_service(self) -> NotificationService:
        return container.notification_service()

    @extend_schema(
        operation_id="notifications_list",
        summary="List my notifications",
        parameters=[
            OpenApiParameter(name="unread_only", type=bool, description="Only unread notifications"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 20)"),
        ],
        responses={200: NotificationListResponseSerializer},
        tags=["Notifications"],
    )
    def list(self, request):
        query = NotificationListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return validation_error_response(query.errors)

        params = query.validated_data
        result = self.get_service().list_notifications(
            request.user, unread_only=params["unread_only"], page=params["page"], page_size=params.get("page_size")
        )
        if not result.ok:
            return error_response(result)

        return Response(
            {
                "success": True,
                "data": {
                    "notifications": NotificationSerializer(result.value["notifications"], many=True).data,
                    "pagination": result.value["pagination"],
                    "unread_count": result.value["unread_count"],
                },
            }
        )

    @extend_schema(
        operation_id="notifications_count",
        summary="Count my notifications",
        responses={200: NotificationCountResponseSerializer},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["get"])
    def count(self, request):
        result = self.get_service().get_counts(request.user)
        if not result.ok:
            return error_response(result)
        return Response({"success": True, "data": result.value})

    @extend_schema(
        operation_id="notifications_mark_read",
        summary="Mark a notification as read",
        request=None,
        responses={
            200: NotificationSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not your notification"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Notification not found"),
        },
        tags=["Notifications"],
    )
    @action(detail=True, methods=["put"])
    def read(self, request, pk=None):
        result = self.get_service().mark_as_read(pk, request.user)
        if not result.ok:
            return error_response(result)
        return Response(
            {
                "success": True,
                "message": "Notification marked as read",
                "data": NotificationSerializer(result.value).data,
            }
        )

    @extend_schema(
        operation_id="notifications_mark_all_read",
        summary="Mark all my notifications as read",
        request=None,
        tags=["Notifications"],
    )
    @action(detail=False, methods=["put"])
    def mark_all_read(self, request):
        result = self.get_service().mark_all_as_read(request.user)
        if not result.ok:
            return error_response(result)
        return Response(
            {"success": True, "message": "All notifications marked as read", "data": {"updated": result.value}}
        )

    @extend_schema(
        operation_id="notifications_delete",
        summary="Delete a notification",
        responses={
            200: OpenApiResponse(description="Notification deleted"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not your notification"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Notification not found"),
        },
        tags=["Notifications"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().delete_notification(pk, request.user)
        if not result.ok:
            return error_response(result)
        return Response({"success": True, "message": "Notification deleted successfully"}, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="notifications_delete_all",
        summary="Delete all my notifications",
        tags=["Notifications"],
    )
    @action(detail=False, methods=["delete"])
    def delete_all(self, request):
        result = self.get_service().delete_all(request.user)
        if not result.ok:
            return error_response(result)
        return Response(
            {"success": True, "message": "All notifications deleted successfully", "data": {"deleted": result.value}}
        )
