from django.urls import path

from .api.views import prometheus_metrics
from .catalog.api.views import AdminProductViewSet, ProductViewSet, ReviewViewSet, SavedItemViewSet
from .ordering.api.views import OrderViewSet

app_name = "marketplace"

urlpatterns = [
    # Products
    path("products/", ProductViewSet.as_view({"get": "list", "post": "create"}), name="product-list"),
    path("products/my-products/", ProductViewSet.as_view({"get": "my_products"}), name="product-my-products"),
    path(
        "products/<uuid:pk>/",
        ProductViewSet.as_view({"get": "retrieve", "put": "update", "patch": "update", "delete": "destroy"}),
        name="product-detail",
    ),
    # Admin moderation
    path(
        "admin/products/dashboard/", AdminProductViewSet.as_view({"get": "dashboard"}), name="admin-product-dashboard"
    ),
    path("admin/products/all/", AdminProductViewSet.as_view({"get": "all_products"}), name="admin-product-all"),
    path("admin/products/pending/", AdminProductViewSet.as_view({"get": "pending"}), name="admin-product-pending"),
    path(
        "admin/products/<uuid:pk>/approve/",
        AdminProductViewSet.as_view({"post": "approve", "put": "approve"}),
        name="admin-product-approve",
    ),
    path(
        "admin/products/<uuid:pk>/reject/",
        AdminProductViewSet.as_view({"post": "reject", "put": "reject"}),
        name="admin-product-reject",
    ),
    # Orders
    path("orders/product/<uuid:product_id>/", OrderViewSet.as_view({"post": "create"}), name="order-create"),
    path("orders/buyer/my-orders/", OrderViewSet.as_view({"get": "buyer_orders"}), name="order-buyer-orders"),
    path("orders/seller/my-orders/", OrderViewSet.as_view({"get": "seller_orders"}), name="order-seller-orders"),
    path("orders/<uuid:pk>/", OrderViewSet.as_view({"get": "retrieve"}), name="order-detail"),
    path("orders/<uuid:pk>/status/", OrderViewSet.as_view({"put": "update_status"}), name="order-update-status"),
    path("orders/<uuid:pk>/cancel/", OrderViewSet.as_view({"put": "cancel"}), name="order-cancel"),
    # Reviews
    path(
        "reviews/product/<uuid:product_id>/",
        ReviewViewSet.as_view({"get": "list", "post": "create"}),
        name="review-product",
    ),
    path("reviews/user/my-reviews/", ReviewViewSet.as_view({"get": "my_reviews"}), name="review-my-reviews"),
    path(
        "reviews/<int:pk>/",
        ReviewViewSet.as_view({"put": "update", "patch": "update", "delete": "destroy"}),
        name="review-detail",
    ),
    path("reviews/<int:pk>/helpful/", ReviewViewSet.as_view({"post": "helpful"}), name="review-helpful"),
    # Saved items
    path(
        "saved-items/product/<uuid:product_id>/", SavedItemViewSet.as_view({"post": "create"}), name="saved-item-create"
    ),
    path("saved-items/my-saved-items/", SavedItemViewSet.as_view({"get": "list"}), name="saved-item-list"),
    path(
        "saved-items/check/<uuid:product_id>/", SavedItemViewSet.as_view({"get": "check"}), name="saved-item-check"
    ),
    path(
        "saved-items/<int:pk>/",
        SavedItemViewSet.as_view({"put": "update", "delete": "destroy"}),
        name="saved-item-detail",
    ),
    # Prometheus metrics endpoint
    path("metrics/", prometheus_metrics.marketplace_prometheus_metrics, name="marketplace-metrics"),
]
