from decimal import Decimal
from typing import Iterable, List, Optional

from .dtos import AddressDTO, OrderDTO, OrderItemDTO, OrderSummaryDTO, PaymentDTO
from .models import Address, Order, OrderItem


def _money(value) -> str:
    return str(Decimal(str(value)).quantize(Decimal("0.01")))


def _timestamp(value) -> str:
    return value.isoformat() if value is not None else ""


class OrderMapper:
    def address_to_dto(self, address: Optional[Address]) -> Optional[AddressDTO]:
        if address is None:
            return None
        return AddressDTO(
            id=address.id,
            kind=address.kind,
            full_name=address.full_name,
            phone=address.phone,
            address_line1=address.address_line1,
            address_line2=address.address_line2,
            city=address.city,
            state=address.state,
            postal_code=address.postal_code,
            country=address.country,
        )

    def item_to_dto(self, item: OrderItem) -> OrderItemDTO:
        return OrderItemDTO(
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            unit_price=_money(item.unit_price),
            subtotal=_money(Decimal(str(item.unit_price)) * item.quantity),
        )

    def to_dto(self, order: Order) -> OrderDTO:
        items = list(order.items.all())
        payment = order.payments.first()
        return OrderDTO(
            id=order.id,
            order_number=order.order_number,
            owner_id=order.owner_id,
            user_email=order.user_email,
            status=order.status,
            payment_status=order.payment_status,
            total_amount=_money(order.total_amount),
            notes=order.notes,
            created_at=_timestamp(order.created_at),
            items=[self.item_to_dto(i) for i in items],
            payment=(
                PaymentDTO(
                    method=payment.method,
                    status=payment.status,
                    amount=_money(payment.amount),
                )
                if payment is not None
                else None
            ),
            shipping_address=self.address_to_dto(order.shipping_address),
            billing_address=self.address_to_dto(order.billing_address),
        )

    def to_summary(self, order: Order) -> OrderSummaryDTO:
        # item_count is annotated by the repository; fall back to counting.
        count = getattr(order, "item_count", None)
        if count is None:
            count = sum(i.quantity for i in order.items.all())
        return OrderSummaryDTO(
            id=order.id,
            order_number=order.order_number,
            status=order.status,
            payment_status=order.payment_status,
            total_amount=_money(order.total_amount),
            item_count=count,
            created_at=_timestamp(order.created_at),
        )

    def many_to_summary(self, orders: Iterable[Order]) -> List[OrderSummaryDTO]:
        return [self.to_summary(o) for o in orders]
