from django.urls import path

from .views import NotificationViewSet

app_name = "notifications"

urlpatterns = [
    path("", NotificationViewSet.as_view({"get": "list"}), name="notification-list"),
    path("count/", NotificationViewSet.as_view({"get": "count"}), name="notification-count"),
    path("mark-all-read/", NotificationViewSet.as_view({"put": "mark_all_read"}), name="notification-mark-all-read"),
    path("delete-all/", NotificationViewSet.as_view({"delete": "delete_all"}), name="notification-delete-all"),
    path("<int:pk>/", NotificationViewSet.as_view({"delete": "destroy"}), name="notification-detail"),
    path("<int:pk>/read/", NotificationViewSet.as_view({"put": "read"}), name="notification-read"),
]
