from typing import Iterable, List, Mapping, Optional

from django.db.models import IntegerField, Sum
from django.db.models.functions import Coalesce

from apps.common.repository import GenericRepository
from apps.users.models import User
from .models import Address, Order, OrderItem, Payment


class OrderRepository(GenericRepository[Order]):
    def __init__(self):
        super().__init__(Order)

    def _queryset(self):
        return self.model.objects.select_related(
            "shipping_address", "billing_address"
        ).prefetch_related("items", "payments")

    def list_for_owner(self, owner_id: int) -> Iterable[Order]:
        return (
            self.model.objects.filter(owner_id=owner_id)
            .annotate(
                item_count=Coalesce(Sum("items__quantity"), 0, output_field=IntegerField())
            )
            .order_by("-created_at", "-id")
        )

    def get_for_owner(self, order_id: int, owner_id: int) -> Optional[Order]:
        return self.get(id=order_id, owner_id=owner_id)

    def add_items(self, order: Order, lines: Iterable[Mapping]) -> List[OrderItem]:
        return OrderItem.objects.bulk_create(
            [OrderItem(order=order, **line) for line in lines]
        )

    def add_payment(self, order: Order, method: str, amount) -> Payment:
        return Payment.objects.create(order=order, method=method, amount=amount)

    def email_for(self, owner_id: int) -> str:
        email = User.objects.filter(pk=owner_id).values_list("email", flat=True).first()
        return email or ""


class AddressRepository(GenericRepository[Address]):
    def __init__(self):
        super().__init__(Address)
