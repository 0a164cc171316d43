from django.urls import path
from .views import (
    CartView,
    CartItemListView,
    CartItemDetailView,
    CartItemIncreaseView,
    CartItemDecreaseView,
)

urlpatterns = [
    path("", CartView.as_view(), name="api-cart"),
    path("items/", CartItemListView.as_view(), name="api-cart-items"),
    path("items/<int:product_id>/", CartItemDetailView.as_view(), name="api-cart-item"),
    path(
        "items/<int:product_id>/increase/",
        CartItemIncreaseView.as_view(),
        name="api-cart-item-increase",
    ),
    path(
        "items/<int:product_id>/decrease/",
        CartItemDecreaseView.as_view(),
        name="api-cart-item-decrease",
    ),
]
