from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol

from .models import Category, Product


class CacheBackendProtocol(Protocol):
    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any, timeout: Optional[int] = ...) -> None:
        ...


class ProductRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional[Product]:
        ...

    def get_available(self, product_id: int) -> Optional[Product]:
        ...

    def list_available(self, category_slug: Optional[str] = None) -> Iterable[Product]:
        ...


class CategoryRepositoryProtocol(Protocol):
    def list(self, **filters) -> Iterable[Category]:
        ...
