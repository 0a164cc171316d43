from __future__ import annotations

from apps.carts.repositories import CartItemRepository

from .mappers import OrderMapper
from .repositories import AddressRepository, OrderRepository
from .services import OrderService


def build_order_service() -> OrderService:
    return OrderService(
        orders=OrderRepository(),
        addresses=AddressRepository(),
        cart_items=CartItemRepository(),
        mapper=OrderMapper(),
    )
