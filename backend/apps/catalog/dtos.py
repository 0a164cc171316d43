from dataclasses import dataclass
from typing import Optional


@dataclass
class CategoryDTO:
    id: int
    name: str
    slug: str


@dataclass
class ProductDTO:
    id: int
    title: str
    slug: str
    price: str
    description: str
    image: str
    stock: int
    status: str
    category: Optional[CategoryDTO]


"""DTO dataclasses only. Mapping logic lives in mappers.py."""
