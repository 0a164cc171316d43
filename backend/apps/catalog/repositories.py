from apps.common.repository import GenericRepository
from .models import Category, Product


class CategoryRepository(GenericRepository[Category]):
    def __init__(self):
        super().__init__(Category)


class ProductRepository(GenericRepository[Product]):
    def __init__(self):
        super().__init__(Product)

    def _queryset(self):
        # Category is mapped onto every DTO; join it up front.
        return self.model.objects.select_related("category")

    def get_available(self, product_id: int):
        return (
            self._queryset()
            .filter(id=product_id, status=Product.Status.ACTIVE)
            .first()
        )

    def list_available(self, category_slug=None):
        qs = self._queryset().filter(status=Product.Status.ACTIVE)
        if category_slug:
            qs = qs.filter(category__slug=category_slug)
        return qs
