from .auth_serializers import MinimalUserSerializer, UserRegistrationSerializer, UserSerializer


__all__ = [
    "UserSerializer",
    "MinimalUserSerializer",
    "UserRegistrationSerializer",
]
