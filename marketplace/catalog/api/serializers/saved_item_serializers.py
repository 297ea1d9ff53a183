from rest_framework import serializers

from marketplace.catalog.domain.models.interaction import SavedItem

from .product_serializers import ProductListSerializer


class SavedItemSerializer(serializers.ModelSerializer):
    product = ProductListSerializer(read_only=True)

    class Meta:
        model = SavedItem
        fields = ["id", "product", "notes", "created_at", "updated_at"]
        read_only_fields = fields


class SavedItemNotesSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default="", max_length=500)


class SavedItemCheckSerializer(serializers.Serializer):
    is_saved = serializers.BooleanField()
    saved_item = SavedItemSerializer(allow_null=True)
