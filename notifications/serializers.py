from rest_framework import serializers

from marketplace.api.serializers import PaginationSerializer

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = [
            "id",
            "type",
            "title",
            "message",
            "is_read",
            "related_order",
            "related_product",
            "metadata",
            "created_at",
        ]
        read_only_fields = fields


class NotificationListQuerySerializer(serializers.Serializer):
    unread_only = serializers.BooleanField(required=False, default=False)
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    page_size = serializers.IntegerField(min_value=1, max_value=100, required=False)


# ===== Documentation-only response shapes =====


class NotificationListDataSerializer(serializers.Serializer):
    notifications = NotificationSerializer(many=True)
    pagination = PaginationSerializer()
    unread_count = serializers.IntegerField()


class NotificationListResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField(default=True)
    data = NotificationListDataSerializer()


class NotificationCountDataSerializer(serializers.Serializer):
    unread_count = serializers.IntegerField()
    total_count = serializers.IntegerField()


class NotificationCountResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField(default=True)
    data = NotificationCountDataSerializer()
