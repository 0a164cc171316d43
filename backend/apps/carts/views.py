from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.api.schemas import error_responses
from apps.common import get_logger
from .container import build_cart_service
from .serializers import (
    CartItemAddSerializer,
    CartLineRemovedSerializer,
    CartLineSerializer,
    CartSummarySerializer,
)

logger = get_logger(__name__).bind(component="carts", layer="view")

PRODUCT_ID_PARAM = OpenApiParameter("product_id", int, OpenApiParameter.PATH)


@extend_schema(tags=["Cart"])
class CartView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartView")

    @extend_schema(
        operation_id="cart_retrieve",
        summary="Get the current user's cart",
        responses={200: CartSummarySerializer, **error_responses(401)},
    )
    def get(self, request):
        summary = self.service.cart_summary(request.user.id)
        return Response(CartSummarySerializer(summary).data)

    @extend_schema(
        operation_id="cart_clear",
        summary="Remove every line from the current user's cart",
        responses={204: None, **error_responses(401)},
    )
    def delete(self, request):
        deleted = self.service.clear_cart(request.user.id)
        self.log.info("Cart cleared via API", owner_id=request.user.id, deleted=deleted)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["Cart"])
class CartItemListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartItemListView")

    @extend_schema(
        operation_id="cart_items_add",
        summary="Add a product to the cart",
        description="Creates the line with quantity 1, or increments an existing line.",
        request=CartItemAddSerializer,
        responses={201: CartLineSerializer, **error_responses(400, 401, 404)},
    )
    def post(self, request):
        serializer = CartItemAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product_id = serializer.validated_data["productId"]
        line = self.service.add_item(product_id, request.user.id)
        self.log.debug(
            "Cart line added via API",
            product_id=product_id,
            owner_id=request.user.id,
            quantity=line.quantity,
        )
        return Response(CartLineSerializer(line).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Cart"])
class CartItemDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()

    @extend_schema(
        operation_id="cart_items_remove",
        summary="Remove a line from the cart",
        parameters=[PRODUCT_ID_PARAM],
        responses={200: CartLineSerializer(many=True), **error_responses(401)},
    )
    def delete(self, request, product_id: int):
        remaining = self.service.remove_item(product_id, request.user.id)
        return Response(CartLineSerializer(remaining, many=True).data)


@extend_schema(tags=["Cart"])
class CartItemIncreaseView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()

    @extend_schema(
        operation_id="cart_items_increase",
        summary="Increase a line's quantity by one",
        parameters=[PRODUCT_ID_PARAM],
        request=None,
        responses={200: CartLineSerializer, **error_responses(401, 404)},
    )
    def post(self, request, product_id: int):
        line = self.service.increase_quantity(product_id, request.user.id)
        return Response(CartLineSerializer(line).data)


@extend_schema(tags=["Cart"])
class CartItemDecreaseView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_cart_service()
    log = logger.bind(view="CartItemDecreaseView")

    @extend_schema(
        operation_id="cart_items_decrease",
        summary="Decrease a line's quantity by one",
        description="A line at quantity 1 is removed; the response then confirms the removal.",
        parameters=[PRODUCT_ID_PARAM],
        request=None,
        responses={200: CartLineSerializer, **error_responses(401, 404)},
    )
    def post(self, request, product_id: int):
        line = self.service.decrease_quantity(product_id, request.user.id)
        if line is None:
            self.log.debug("Cart line removed via decrease", product_id=product_id)
            payload = {"removed": True, "productId": product_id}
            return Response(CartLineRemovedSerializer(payload).data)
        return Response(CartLineSerializer(line).data)
