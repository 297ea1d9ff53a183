import logging

from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView

from authentication.api.serializers import UserRegistrationSerializer, UserSerializer
from authentication.api.serializers.response_serializers import (
    ErrorResponseSerializer,
    LoginRequestSerializer,
    LoginResponseSerializer,
    RegisterResponseSerializer,
)


logger = logging.getLogger(__name__)


class RegisterAPIView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="auth_register",
        summary="Register new user account",
        description="""
        Create a buyer or seller account and return a JWT token pair.

        Admin accounts cannot be self-registered.
        """,
        request=UserRegistrationSerializer,
        responses={
            201: OpenApiResponse(
                response=RegisterResponseSerializer,
                description="Registration successful",
                examples=[
                    OpenApiExample(
                        "Successful Registration",
                        value={
                            "message": "Registration successful",
                            "access": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                            "refresh": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                            "user": {
                                "id": "123e4567-e89b-12d3-a456-426614174000",
                                "email": "newuser@example.com",
                                "username": "newuser",
                                "role": "buyer",
                            },
                        },
                    )
                ],
            ),
            400: OpenApiResponse(
                response=ErrorResponseSerializer,
                description="Validation error (email exists, passwords don't match, etc.)",
            ),
        },
        tags=["Authentication"],
    )
    def post(self, request):
        serializer = UserRegistrationSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        user = serializer.save()
        refresh = RefreshToken.for_user(user)
        logger.info(f"Registered user {user.id} with role {user.role}")

        return Response(
            {
                "message": "Registration successful",
                "access": str(refresh.access_token),
                "refresh": str(refresh),
                "user": UserSerializer(user).data,
            },
            status=status.HTTP_201_CREATED,
        )


class LoginAPIView(TokenObtainPairView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="auth_login",
        summary="Login with email and password",
        request=LoginRequestSerializer,
        responses={
            200: OpenApiResponse(response=LoginResponseSerializer, description="Login successful"),
            401: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid credentials"),
        },
        tags=["Authentication"],
    )
    def post(self, request, *args, **kwargs):
        return super().post(request, *args, **kwargs)


class CurrentUserView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="auth_me",
        summary="Get the authenticated user",
        responses={200: UserSerializer, 401: OpenApiResponse(response=ErrorResponseSerializer)},
        tags=["Authentication"],
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data, status=status.HTTP_200_OK)
