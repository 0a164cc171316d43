from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Optional

from django.db import IntegrityError, transaction

from apps.api.exceptions import ApplicationError
from apps.catalog.services import ProductNotFoundError
from apps.common import get_logger
from .commands import CartLineCommand, coerce_id
from .dtos import CartLineDTO, CartSummaryDTO
from .protocols import (
    CartItemMapperProtocol,
    CartItemRepositoryProtocol,
    ProductRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="carts", layer="service")


class CartItemNotFoundError(ApplicationError):
    """Raised when the owner has no line for the requested product."""

    default_code = "NOT_FOUND"
    default_message = "Cart item not found"


class InvalidCartInputError(ApplicationError):
    default_code = "VALIDATION_ERROR"
    default_message = "Invalid cart input"


class CartService:
    """
    Durable cart lines keyed by ``(product_id, owner_id)``.

    Quantity writes lock the row so concurrent requests against the same
    line serialize at the database.
    """

    def __init__(
        self,
        items: CartItemRepositoryProtocol,
        products: ProductRepositoryProtocol,
        mapper: CartItemMapperProtocol,
    ):
        self.items = items
        self.products = products
        self.mapper = mapper
        self.logger = logger.bind(service="CartService")

    def _command(self, product_id: Any, owner_id: Any) -> CartLineCommand:
        command = CartLineCommand.from_raw(product_id, owner_id)
        if command is None:
            self.logger.warning(
                "Rejected cart line input", product_id=product_id, owner_id=owner_id
            )
            raise InvalidCartInputError(
                details={"productId": str(product_id), "ownerId": str(owner_id)}
            )
        return command

    def _owner(self, owner_id: Any) -> int:
        oid = coerce_id(owner_id)
        if oid is None:
            self.logger.warning("Rejected cart owner", owner_id=owner_id)
            raise InvalidCartInputError(details={"ownerId": str(owner_id)})
        return oid

    def _missing_line(self, command: CartLineCommand, action: str) -> CartItemNotFoundError:
        self.logger.warning(
            "Cart line missing",
            action=action,
            product_id=command.product_id,
            owner_id=command.owner_id,
        )
        return CartItemNotFoundError(
            details={"productId": str(command.product_id)}
        )

    def fetch_cart(self, owner_id: Any) -> List[CartLineDTO]:
        oid = self._owner(owner_id)
        self.logger.debug("Fetching cart", owner_id=oid)
        return self.mapper.many_to_dto(self.items.list_for_owner(oid))

    def cart_summary(self, owner_id: Any) -> CartSummaryDTO:
        oid = self._owner(owner_id)
        rows = list(self.items.list_for_owner(oid))
        total_items = sum(row.quantity for row in rows)
        total_price = sum(
            (Decimal(str(row.product.price)) * row.quantity for row in rows),
            Decimal("0"),
        )
        return CartSummaryDTO(
            owner_id=oid,
            items=self.mapper.many_to_dto(rows),
            total_items=total_items,
            total_price=str(total_price.quantize(Decimal("0.01"))),
        )

    def add_item(self, product_id: Any, owner_id: Any) -> CartLineDTO:
        command = self._command(product_id, owner_id)
        with transaction.atomic():
            product = self.products.get_available(command.product_id)
            if product is None:
                self.logger.warning(
                    "Cannot add unavailable product",
                    product_id=command.product_id,
                    owner_id=command.owner_id,
                )
                raise ProductNotFoundError(
                    details={"productId": str(command.product_id)}
                )
            item = self.items.get_for_update(command.owner_id, command.product_id)
            if item is None:
                try:
                    with transaction.atomic():
                        item = self.items.create(
                            owner_id=command.owner_id, product=product, quantity=1
                        )
                except IntegrityError:
                    # Another request inserted the line first.
                    item = self.items.get_for_update(command.owner_id, command.product_id)
                    if item is None:
                        raise
                    item = self.items.set_quantity(item, item.quantity + 1)
                else:
                    self.logger.info(
                        "Cart line created",
                        product_id=command.product_id,
                        owner_id=command.owner_id,
                    )
                    return self.mapper.to_dto(item)
            else:
                item = self.items.set_quantity(item, item.quantity + 1)
        self.logger.debug(
            "Cart line incremented",
            product_id=command.product_id,
            owner_id=command.owner_id,
            quantity=item.quantity,
        )
        return self.mapper.to_dto(item)

    def increase_quantity(self, product_id: Any, owner_id: Any) -> CartLineDTO:
        command = self._command(product_id, owner_id)
        with transaction.atomic():
            item = self.items.get_for_update(command.owner_id, command.product_id)
            if item is None:
                raise self._missing_line(command, "increase")
            item = self.items.set_quantity(item, item.quantity + 1)
        self.logger.debug(
            "Cart line increased",
            product_id=command.product_id,
            owner_id=command.owner_id,
            quantity=item.quantity,
        )
        return self.mapper.to_dto(item)

    def decrease_quantity(self, product_id: Any, owner_id: Any) -> Optional[CartLineDTO]:
        """
        Decrement a line. A line at quantity 1 is deleted instead and
        ``None`` is returned as the removal confirmation.
        """
        command = self._command(product_id, owner_id)
        with transaction.atomic():
            item = self.items.get_for_update(command.owner_id, command.product_id)
            if item is None:
                raise self._missing_line(command, "decrease")
            if item.quantity <= 1:
                self.items.delete(item)
                self.logger.info(
                    "Cart line removed on decrease",
                    product_id=command.product_id,
                    owner_id=command.owner_id,
                )
                return None
            item = self.items.set_quantity(item, item.quantity - 1)
        self.logger.debug(
            "Cart line decreased",
            product_id=command.product_id,
            owner_id=command.owner_id,
            quantity=item.quantity,
        )
        return self.mapper.to_dto(item)

    def remove_item(self, product_id: Any, owner_id: Any) -> List[CartLineDTO]:
        command = self._command(product_id, owner_id)
        with transaction.atomic():
            deleted = self.items.delete_line(command.owner_id, command.product_id)
        self.logger.info(
            "Cart line removed",
            product_id=command.product_id,
            owner_id=command.owner_id,
            deleted=deleted,
        )
        return self.fetch_cart(command.owner_id)

    def clear_cart(self, owner_id: Any) -> int:
        oid = self._owner(owner_id)
        with transaction.atomic():
            deleted = self.items.delete_for_owner(oid)
        self.logger.info("Cart cleared", owner_id=oid, deleted=deleted)
        return deleted
