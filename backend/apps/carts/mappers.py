from typing import Iterable, List

from .dtos import CartLineDTO
from .models import CartItem


class CartItemMapper:
    """Flattens a cart row and its product into the display line."""

    def to_dto(self, item: CartItem) -> CartLineDTO:
        product = item.product
        return CartLineDTO(
            product_id=item.product_id,
            owner_id=item.owner_id,
            quantity=item.quantity,
            title=product.title,
            price=str(product.price),
            image=product.image,
        )

    def many_to_dto(self, items: Iterable[CartItem]) -> List[CartLineDTO]:
        return [self.to_dto(i) for i in items]
