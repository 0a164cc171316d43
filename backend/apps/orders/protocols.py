from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Protocol, TYPE_CHECKING

from .models import Address, Order, OrderItem, Payment

if TYPE_CHECKING:
    from apps.carts.models import CartItem
    from .dtos import OrderDTO, OrderSummaryDTO


class OrderRepositoryProtocol(Protocol):
    def create(self, **data) -> Order:
        ...

    def list_for_owner(self, owner_id: int) -> Iterable[Order]:
        ...

    def get_for_owner(self, order_id: int, owner_id: int) -> Optional[Order]:
        ...

    def add_items(self, order: Order, lines: Iterable[Mapping]) -> List[OrderItem]:
        ...

    def add_payment(self, order: Order, method: str, amount) -> Payment:
        ...

    def email_for(self, owner_id: int) -> str:
        ...


class AddressRepositoryProtocol(Protocol):
    def create(self, **data) -> Address:
        ...


class CartLineSourceProtocol(Protocol):
    def lock_for_owner(self, owner_id: int) -> List["CartItem"]:
        ...

    def delete_for_owner(self, owner_id: int) -> int:
        ...


class OrderMapperProtocol(Protocol):
    def to_dto(self, order: Order) -> "OrderDTO":
        ...

    def many_to_summary(self, orders: Iterable[Order]) -> List["OrderSummaryDTO"]:
        ...
