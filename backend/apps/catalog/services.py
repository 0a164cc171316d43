from __future__ import annotations

from typing import Optional, Type

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from apps.api.exceptions import ApplicationError
from apps.common import get_logger
from .mappers import ProductMapper, CategoryMapper
from .protocols import (
    CacheBackendProtocol,
    CategoryRepositoryProtocol,
    ProductRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="catalog", layer="service")


class ProductNotFoundError(ApplicationError):
    """Raised when a product is missing or not available for sale."""

    default_code = "NOT_FOUND"
    default_message = "Product not found"


class ProductService:
    def __init__(
        self,
        products: ProductRepositoryProtocol,
        cache_backend: CacheBackendProtocol,
        disable_cache: bool = False,
    ):
        self.products = products
        self.cache = cache_backend
        self.disable_cache = disable_cache
        self.logger = logger.bind(service="ProductService")
        self._cache_prefix = "products"
        self._cache_version_key = f"{self._cache_prefix}:version"
        self._default_version = 1

    def _get_cache_version(self) -> int:
        v = self.cache.get(self._cache_version_key)
        return v or self._default_version

    def invalidate_cache(self) -> None:
        """Orphan every cached product entry by bumping the key version."""
        v = self._get_cache_version()
        # Version key should not expire
        self.cache.set(self._cache_version_key, v + 1, timeout=None)
        self.logger.debug("Bumped product cache version", new_version=v + 1)

    def _cache_key(self, *parts) -> str:
        version = self._get_cache_version()
        suffix = ":".join(str(p) for p in parts)
        return f"{self._cache_prefix}:v{version}:{suffix}"

    def get_product(self, product_id: int):
        """Return the DTO of an active product, or ``None``."""
        if self.disable_cache:
            return self._load_product(product_id)
        key = self._cache_key("detail", product_id)
        cached = self.cache.get(key)
        if cached is not None:
            self.logger.debug("Product cache hit", cache_key=key)
            return cached
        dto = self._load_product(product_id)
        if dto is not None:
            self.cache.set(key, dto)
        return dto

    def _load_product(self, product_id: int):
        self.logger.debug("Fetching product", product_id=product_id)
        product = self.products.get_available(product_id)
        if not product:
            self.logger.info("Product not found", product_id=product_id)
            return None
        return ProductMapper.to_dto(product)

    def list_products(self, category: Optional[str] = None):
        self.logger.debug(
            "Listing products",
            category=category,
            cache_enabled=not self.disable_cache,
        )
        if self.disable_cache:
            return ProductMapper.many_to_dto(self.products.list_available(category))
        key = self._cache_key("list", category or "all")
        cached = self.cache.get(key)
        if cached is not None:
            self.logger.debug("Product list cache hit", cache_key=key)
            return cached
        self.logger.debug("Product list cache miss", cache_key=key)
        data = ProductMapper.many_to_dto(self.products.list_available(category))
        self.cache.set(key, data)
        return data

    def list_products_paginated(
        self,
        request,
        *,
        category: Optional[str] = None,
        paginator_class: Optional[Type[PageNumberPagination]] = None,
        serializer_class=None,
        view=None,
    ):
        paginator = (paginator_class or PageNumberPagination)()
        queryset = self.products.list_available(category)
        page = paginator.paginate_queryset(queryset, request, view=view)
        dtos = ProductMapper.many_to_dto(page if page is not None else queryset)
        if serializer_class is None:
            from .serializers import ProductReadSerializer  # Avoid circular import

            serializer_class = ProductReadSerializer
        serializer = serializer_class(dtos, many=True)
        if page is None:
            return Response(serializer.data)
        return paginator.get_paginated_response(serializer.data)


class CategoryService:
    def __init__(self, categories: CategoryRepositoryProtocol):
        self.categories = categories
        self.logger = logger.bind(service="CategoryService")

    def list_categories(self):
        self.logger.debug("Listing categories")
        return CategoryMapper.many_to_dto(self.categories.list())
