from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class AddressDTO:
    id: int
    kind: str
    full_name: str
    phone: str
    address_line1: str
    address_line2: str
    city: str
    state: str
    postal_code: str
    country: str


@dataclass
class OrderItemDTO:
    product_id: Optional[int]
    product_name: str
    quantity: int
    unit_price: str
    subtotal: str


@dataclass
class PaymentDTO:
    method: str
    status: str
    amount: str


@dataclass
class OrderSummaryDTO:
    id: int
    order_number: str
    status: str
    payment_status: str
    total_amount: str
    item_count: int
    created_at: str


@dataclass
class OrderDTO:
    id: int
    order_number: str
    owner_id: int
    user_email: str
    status: str
    payment_status: str
    total_amount: str
    notes: str
    created_at: str
    items: List[OrderItemDTO] = field(default_factory=list)
    payment: Optional[PaymentDTO] = None
    shipping_address: Optional[AddressDTO] = None
    billing_address: Optional[AddressDTO] = None
