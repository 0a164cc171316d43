from dataclasses import dataclass, field
from typing import List


@dataclass
class CartLineDTO:
    product_id: int
    owner_id: int
    quantity: int
    title: str
    price: str
    image: str


@dataclass
class CartSummaryDTO:
    owner_id: int
    items: List[CartLineDTO] = field(default_factory=list)
    total_items: int = 0
    total_price: str = "0.00"


"""DTO dataclasses only. Mapping logic lives in mappers.py."""
