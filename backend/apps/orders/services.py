from __future__ import annotations

import secrets
from decimal import Decimal
from typing import Any, Callable, List, Mapping, Optional, Tuple

from django.db import transaction
from django.utils import timezone

from apps.api.exceptions import ApplicationError
from apps.carts.commands import coerce_id
from apps.catalog.services import ProductNotFoundError
from apps.common import get_logger
from .dtos import OrderDTO, OrderSummaryDTO
from .models import Address, Payment
from .protocols import (
    AddressRepositoryProtocol,
    CartLineSourceProtocol,
    OrderMapperProtocol,
    OrderRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="orders", layer="service")


class OrderNotFoundError(ApplicationError):
    default_code = "NOT_FOUND"
    default_message = "Order not found"


class EmptyCartError(ApplicationError):
    default_code = "VALIDATION_ERROR"
    default_message = "Cart is empty"


class InvalidOrderInputError(ApplicationError):
    default_code = "VALIDATION_ERROR"
    default_message = "Invalid order input"


def make_order_number(now=None) -> str:
    """Human-readable order reference, e.g. ``ORD-20261019-004217``."""
    now = now or timezone.now()
    return f"ORD-{now:%Y%m%d}-{secrets.randbelow(1_000_000):06d}"


class OrderService:
    """
    Turns an owner's cart into an order.

    Checkout locks the cart lines, writes addresses, the order, its items and
    a pending payment, then empties the cart, all in one transaction.
    """

    def __init__(
        self,
        orders: OrderRepositoryProtocol,
        addresses: AddressRepositoryProtocol,
        cart_items: CartLineSourceProtocol,
        mapper: OrderMapperProtocol,
        order_numbers: Callable[[], str] = make_order_number,
    ):
        self.orders = orders
        self.addresses = addresses
        self.cart_items = cart_items
        self.mapper = mapper
        self.order_numbers = order_numbers
        self.logger = logger.bind(service="OrderService")

    def _owner(self, owner_id: Any) -> int:
        oid = coerce_id(owner_id)
        if oid is None:
            self.logger.warning("Rejected order owner", owner_id=owner_id)
            raise InvalidOrderInputError(details={"ownerId": str(owner_id)})
        return oid

    def _save_addresses(
        self, owner_id: int, addresses: Optional[Mapping[str, Any]]
    ) -> Tuple[Optional[Address], Optional[Address]]:
        if not addresses:
            return None, None
        shipping = self.addresses.create(
            owner_id=owner_id, kind=Address.Kind.SHIPPING, **addresses["shipping"]
        )
        if addresses.get("billing_same_as_shipping", True):
            return shipping, shipping
        billing_data = addresses.get("billing")
        if not billing_data:
            return shipping, None
        billing = self.addresses.create(
            owner_id=owner_id, kind=Address.Kind.BILLING, **billing_data
        )
        return shipping, billing

    def checkout(
        self,
        owner_id: Any,
        *,
        payment_method: str = Payment.Method.COD,
        addresses: Optional[Mapping[str, Any]] = None,
        notes: str = "",
    ) -> OrderDTO:
        oid = self._owner(owner_id)
        if payment_method not in Payment.Method.values:
            raise InvalidOrderInputError(details={"paymentMethod": str(payment_method)})

        with transaction.atomic():
            lines = self.cart_items.lock_for_owner(oid)
            if not lines:
                self.logger.warning("Checkout with empty cart", owner_id=oid)
                raise EmptyCartError(details={"ownerId": str(oid)})
            unavailable = [line.product_id for line in lines if not line.product.is_available]
            if unavailable:
                self.logger.warning(
                    "Checkout blocked by unavailable products",
                    owner_id=oid,
                    product_ids=unavailable,
                )
                raise ProductNotFoundError(
                    message="Some products are no longer available",
                    details={"productIds": [str(pid) for pid in unavailable]},
                )

            shipping, billing = self._save_addresses(oid, addresses)
            total = sum(
                (Decimal(str(line.product.price)) * line.quantity for line in lines),
                Decimal("0"),
            )
            order = self.orders.create(
                order_number=self.order_numbers(),
                owner_id=oid,
                user_email=self.orders.email_for(oid),
                shipping_address=shipping,
                billing_address=billing,
                notes=notes,
                total_amount=total,
            )
            self.orders.add_items(
                order,
                [
                    {
                        "product": line.product,
                        "product_name": line.product.title,
                        "quantity": line.quantity,
                        "unit_price": line.product.price,
                    }
                    for line in lines
                ],
            )
            self.orders.add_payment(order, method=payment_method, amount=total)
            cleared = self.cart_items.delete_for_owner(oid)

        self.logger.success(
            "Order placed",
            owner_id=oid,
            order_number=order.order_number,
            total=str(total),
            lines=cleared,
        )
        return self.get_order(order.id, oid)

    def list_orders(self, owner_id: Any) -> List[OrderSummaryDTO]:
        oid = self._owner(owner_id)
        self.logger.debug("Listing orders", owner_id=oid)
        return self.mapper.many_to_summary(self.orders.list_for_owner(oid))

    def get_order(self, order_id: Any, owner_id: Any) -> OrderDTO:
        oid = self._owner(owner_id)
        pk = coerce_id(order_id)
        order = self.orders.get_for_owner(pk, oid) if pk is not None else None
        if order is None:
            self.logger.warning("Order not found", order_id=order_id, owner_id=oid)
            raise OrderNotFoundError(details={"id": str(order_id)})
        return self.mapper.to_dto(order)
