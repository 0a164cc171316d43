from typing import Iterable, List

from .dtos import ProductDTO, CategoryDTO
from .models import Product, Category


class CategoryMapper:
    @staticmethod
    def to_dto(cat: Category) -> CategoryDTO:
        return CategoryDTO(id=cat.id, name=cat.name, slug=cat.slug)

    @staticmethod
    def many_to_dto(categories: Iterable[Category]) -> List[CategoryDTO]:
        return [CategoryMapper.to_dto(c) for c in categories]


class ProductMapper:
    @staticmethod
    def to_dto(product: Product) -> ProductDTO:
        category = getattr(product, "category", None)
        return ProductDTO(
            id=product.id,
            title=product.title,
            slug=product.slug,
            price=str(product.price),
            description=product.description,
            image=product.image,
            stock=product.stock,
            status=product.status,
            category=CategoryMapper.to_dto(category) if category is not None else None,
        )

    @staticmethod
    def many_to_dto(products: Iterable[Product]) -> List[ProductDTO]:
        return [ProductMapper.to_dto(p) for p in products]
