"""
Response Serializers for API Documentation

These serializers define the structure of API responses for OpenAPI schema generation.
They are NOT used for data validation, only for documentation in Swagger/ReDoc.
"""

from rest_framework import serializers

from .auth_serializers import UserSerializer


class ErrorResponseSerializer(serializers.Serializer):
    """Standard error response"""

    detail = serializers.CharField(help_text="Human-readable error message")


class RegisterResponseSerializer(serializers.Serializer):
    """Response for successful registration"""

    message = serializers.CharField(help_text="Success message")
    access = serializers.CharField(help_text="JWT access token")
    refresh = serializers.CharField(help_text="JWT refresh token")
    user = UserSerializer(help_text="Newly registered user details")


class LoginRequestSerializer(serializers.Serializer):
    """Request body for login"""

    email = serializers.EmailField(help_text="User's email address")
    password = serializers.CharField(write_only=True, style={"input_type": "password"}, help_text="User's password")


class LoginResponseSerializer(serializers.Serializer):
    """Token pair issued on login"""

    access = serializers.CharField(help_text="JWT access token")
    refresh = serializers.CharField(help_text="JWT refresh token")
