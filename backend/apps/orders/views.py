from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.api.schemas import error_responses
from apps.common import get_logger
from .container import build_order_service
from .serializers import CheckoutSerializer, OrderSerializer, OrderSummarySerializer

logger = get_logger(__name__).bind(component="orders", layer="view")


@extend_schema(tags=["Orders"])
class CheckoutView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "checkout"
    service = build_order_service()
    log = logger.bind(view="CheckoutView")

    @extend_schema(
        operation_id="checkout_create",
        summary="Place an order from the current user's cart",
        description=(
            "Creates the order, its items and a pending payment from the cart "
            "lines, then empties the cart."
        ),
        request=CheckoutSerializer,
        responses={201: OrderSerializer, **error_responses(400, 401, 404, 429)},
    )
    def post(self, request):
        serializer = CheckoutSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        order = self.service.checkout(
            request.user.id,
            payment_method=data["payment_method"],
            addresses=data.get("addresses"),
            notes=data.get("notes", ""),
        )
        self.log.info(
            "Checkout completed via API",
            owner_id=request.user.id,
            order_number=order.order_number,
        )
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Orders"])
class OrderListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()

    @extend_schema(
        operation_id="orders_list",
        summary="List the current user's orders, newest first",
        responses={200: OrderSummarySerializer(many=True), **error_responses(401)},
    )
    def get(self, request):
        orders = self.service.list_orders(request.user.id)
        return Response(OrderSummarySerializer(orders, many=True).data)


@extend_schema(tags=["Orders"])
class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()

    @extend_schema(
        operation_id="orders_retrieve",
        summary="Get one of the current user's orders",
        parameters=[OpenApiParameter("order_id", int, OpenApiParameter.PATH)],
        responses={200: OrderSerializer, **error_responses(401, 404)},
    )
    def get(self, request, order_id: int):
        order = self.service.get_order(order_id, request.user.id)
        return Response(OrderSerializer(order).data)
