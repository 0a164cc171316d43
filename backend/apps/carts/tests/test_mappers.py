import types
import unittest
from decimal import Decimal

from apps.carts.mappers import CartItemMapper


def make_item(product_id=42, owner_id=1, quantity=2, price=Decimal("19.90")):
    product = types.SimpleNamespace(
        id=product_id, title="Pressure Tank", price=price, image="/img/tank.png"
    )
    return types.SimpleNamespace(
        product=product, product_id=product_id, owner_id=owner_id, quantity=quantity
    )


class CartItemMapperTests(unittest.TestCase):
    def test_to_dto_copies_display_fields(self):
        dto = CartItemMapper().to_dto(make_item())
        self.assertEqual(dto.product_id, 42)
        self.assertEqual(dto.owner_id, 1)
        self.assertEqual(dto.quantity, 2)
        self.assertEqual(dto.title, "Pressure Tank")
        self.assertEqual(dto.price, "19.90")
        self.assertEqual(dto.image, "/img/tank.png")

    def test_many_to_dto(self):
        dtos = CartItemMapper().many_to_dto([make_item(1), make_item(2)])
        self.assertEqual([d.product_id for d in dtos], [1, 2])
