from __future__ import annotations

from typing import Any, Hashable, List, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.catalog.dtos import ProductDTO
    from .state import CartLine


class CartGatewayProtocol(Protocol):
    async def add(self, product_id: Hashable, owner_id: Hashable) -> Any:
        ...

    async def increase(self, product_id: Hashable, owner_id: Hashable) -> Any:
        ...

    async def decrease(self, product_id: Hashable, owner_id: Hashable) -> Any:
        ...

    async def remove(self, product_id: Hashable, owner_id: Hashable) -> Any:
        ...

    async def clear(self, owner_id: Hashable) -> Any:
        ...

    async def fetch(self, owner_id: Hashable) -> List["CartLine"]:
        ...


class ProductLookupProtocol(Protocol):
    async def get(self, product_id: Hashable) -> Optional["ProductDTO"]:
        ...
