from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from authentication.domain.models import CustomUser


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = (
            "id",
            "username",
            "email",
            "full_name",
            "phone_number",
            "role",
            "date_joined",
        )
        read_only_fields = ("id", "email", "role", "date_joined")


class MinimalUserSerializer(serializers.ModelSerializer):
    """Identity block embedded in orders and listings."""

    class Meta:
        model = CustomUser
        fields = ("id", "username", "full_name", "email")
        read_only_fields = fields


class UserRegistrationSerializer(serializers.ModelSerializer):
    SELF_ASSIGNABLE_ROLES = [CustomUser.ROLE_BUYER, CustomUser.ROLE_SELLER]

    password = serializers.CharField(write_only=True, validators=[validate_password])
    password_confirm = serializers.CharField(write_only=True)
    role = serializers.ChoiceField(choices=SELF_ASSIGNABLE_ROLES, default=CustomUser.ROLE_BUYER)

    class Meta:
        model = CustomUser
        fields = ("username", "email", "password", "password_confirm", "full_name", "phone_number", "role")

    def validate_email(self, value):
        if CustomUser.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return value.lower()

    def validate(self, attrs):
        if attrs["password"] != attrs["password_confirm"]:
            raise serializers.ValidationError({"password_confirm": "Password fields didn't match."})
        return attrs

    def create(self, validated_data):
        validated_data.pop("password_confirm")
        user = CustomUser.objects.create_user(**validated_data)
        return user
