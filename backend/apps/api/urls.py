from django.urls import path, include
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from apps.catalog.views import (
    ProductListView,
    ProductDetailView,
    CategoryListView,
)
from apps.orders.views import CheckoutView

urlpatterns = [
    path("products/", ProductListView.as_view(), name="api-products-list"),
    path(
        "products/<int:product_id>/",
        ProductDetailView.as_view(),
        name="api-products-detail",
    ),
    path("categories/", CategoryListView.as_view(), name="api-categories-list"),
    path("cart/", include("apps.carts.urls")),
    path("checkout/", CheckoutView.as_view(), name="api-checkout"),
    path("orders/", include("apps.orders.urls")),
    # Token issuing is delegated to simplejwt
    path("auth/token/", TokenObtainPairView.as_view(), name="auth-token"),
    path("auth/token/refresh/", TokenRefreshView.as_view(), name="auth-token-refresh"),
]
