from django.db import models
from apps.users.models import User
from apps.catalog.models import Product


class CartItem(models.Model):
    """One product line in a user's cart."""

    owner = models.ForeignKey(User, on_delete=models.CASCADE, related_name="cart_items")
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="cart_items")
    quantity = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "cart_items"
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["owner", "product"], name="cart_item_owner_product_uniq"
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1), name="cart_item_quantity_gte_1"
            ),
        ]

    def __str__(self):
        return f"CartItem owner={self.owner_id} product={self.product_id} x{self.quantity}"
