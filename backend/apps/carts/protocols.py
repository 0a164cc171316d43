from __future__ import annotations

from typing import Iterable, List, Optional, Protocol, TYPE_CHECKING

from .models import CartItem

if TYPE_CHECKING:
    from apps.carts.dtos import CartLineDTO
    from apps.catalog.models import Product


class CartItemRepositoryProtocol(Protocol):
    def list_for_owner(self, owner_id: int) -> Iterable[CartItem]:
        ...

    def get_for_update(self, owner_id: int, product_id: int) -> Optional[CartItem]:
        ...

    def create(self, **data) -> CartItem:
        ...

    def set_quantity(self, item: CartItem, quantity: int) -> CartItem:
        ...

    def delete(self, item: CartItem) -> None:
        ...

    def delete_line(self, owner_id: int, product_id: int) -> int:
        ...

    def delete_for_owner(self, owner_id: int) -> int:
        ...


class ProductRepositoryProtocol(Protocol):
    def get_available(self, product_id: int) -> Optional["Product"]:
        ...


class CartItemMapperProtocol(Protocol):
    def to_dto(self, item: CartItem) -> "CartLineDTO":
        ...

    def many_to_dto(self, items: Iterable[CartItem]) -> List["CartLineDTO"]:
        ...
