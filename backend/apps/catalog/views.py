from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.api.schemas import paginated_response, error_responses
from apps.common import get_logger
from .container import build_product_service, build_category_service
from .pagination import ProductListPagination
from .serializers import ProductReadSerializer, CategorySerializer
from .services import ProductNotFoundError

logger = get_logger(__name__).bind(component="catalog", layer="view")


@extend_schema(tags=["Catalog"])
class ProductListView(APIView):
    permission_classes = [AllowAny]
    service = build_product_service()
    log = logger.bind(view="ProductListView")

    @extend_schema(
        operation_id="products_list",
        summary="List products",
        description="Active products only. Supports pagination via ?page and ?limit.",
        parameters=[
            OpenApiParameter(
                name="category",
                description="Filter by category slug",
                required=False,
                type=str,
            )
        ],
        responses={200: paginated_response(ProductReadSerializer)},
    )
    def get(self, request):
        category = request.query_params.get("category")
        self.log.debug("Handling product list request", category=category)
        return self.service.list_products_paginated(
            request,
            category=category,
            paginator_class=ProductListPagination,
            serializer_class=ProductReadSerializer,
            view=self,
        )


@extend_schema(tags=["Catalog"])
class ProductDetailView(APIView):
    permission_classes = [AllowAny]
    service = build_product_service()
    log = logger.bind(view="ProductDetailView")

    @extend_schema(
        operation_id="products_retrieve",
        summary="Get product",
        parameters=[OpenApiParameter("product_id", int, OpenApiParameter.PATH)],
        responses={200: ProductReadSerializer, **error_responses(404)},
    )
    def get(self, request, product_id: int):
        self.log.debug("Fetching product detail", product_id=product_id)
        dto = self.service.get_product(product_id)
        if not dto:
            raise ProductNotFoundError(details={"id": str(product_id)})
        return Response(ProductReadSerializer(dto).data)


@extend_schema(tags=["Catalog"])
class CategoryListView(APIView):
    permission_classes = [AllowAny]
    service = build_category_service()

    @extend_schema(summary="List categories", responses={200: CategorySerializer(many=True)})
    def get(self, request):
        return Response(CategorySerializer(self.service.list_categories(), many=True).data)
