from authentication.api.urls.auth_urls import urlpatterns


app_name = "authentication"

__all__ = ["urlpatterns"]
