from .auth_views import CurrentUserView, LoginAPIView, RegisterAPIView


__all__ = [
    "RegisterAPIView",
    "LoginAPIView",
    "CurrentUserView",
]
