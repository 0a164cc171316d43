from typing import Optional

from apps.common.repository import GenericRepository
from .models import CartItem


class CartItemRepository(GenericRepository[CartItem]):
    def __init__(self):
        super().__init__(CartItem)

    def _queryset(self):
        return self.model.objects.select_related("product")

    def list_for_owner(self, owner_id: int):
        return self._queryset().filter(owner_id=owner_id).order_by("-created_at", "-id")

    def get_for_update(self, owner_id: int, product_id: int) -> Optional[CartItem]:
        # Row lock only; the product join would lock catalog rows as well.
        return (
            self.model.objects.select_for_update()
            .filter(owner_id=owner_id, product_id=product_id)
            .first()
        )

    def lock_for_owner(self, owner_id: int):
        """Owner's lines with their products, rows locked until commit."""
        return list(
            self._queryset()
            .select_for_update(of=("self",))
            .filter(owner_id=owner_id)
            .order_by("created_at", "id")
        )

    def set_quantity(self, item: CartItem, quantity: int) -> CartItem:
        item.quantity = quantity
        item.save(update_fields=["quantity", "updated_at"])
        return item

    def delete_line(self, owner_id: int, product_id: int) -> int:
        deleted, _ = self.model.objects.filter(
            owner_id=owner_id, product_id=product_id
        ).delete()
        return deleted

    def delete_for_owner(self, owner_id: int) -> int:
        deleted, _ = self.model.objects.filter(owner_id=owner_id).delete()
        return deleted
