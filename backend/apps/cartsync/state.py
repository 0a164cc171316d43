from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Callable, Hashable, Iterable, List, Tuple

from apps.common import get_logger

logger = get_logger(__name__).bind(component="cartsync", layer="store")

Lines = Tuple["CartLine", ...]
Subscriber = Callable[[Lines], None]


@dataclass(frozen=True)
class CartLine:
    product_id: Hashable
    owner_id: Hashable
    quantity: int
    title: str = ""
    price: Decimal = Decimal("0")
    image: str = ""

    def matches(self, product_id: Hashable, owner_id: Hashable) -> bool:
        return self.product_id == product_id and self.owner_id == owner_id

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class CartSnapshot:
    """Every line of the store at one point in time."""

    lines: Lines = ()


# Reducers: each takes the current lines and returns a new tuple.


def add_line(
    lines: Lines,
    product_id: Hashable,
    owner_id: Hashable,
    *,
    title: str = "",
    price: Decimal = Decimal("0"),
    image: str = "",
) -> Lines:
    if any(line.matches(product_id, owner_id) for line in lines):
        return increase_line(lines, product_id, owner_id)
    line = CartLine(
        product_id=product_id,
        owner_id=owner_id,
        quantity=1,
        title=title,
        price=price,
        image=image,
    )
    return (*lines, line)


def describe_line(
    lines: Lines,
    product_id: Hashable,
    owner_id: Hashable,
    *,
    title: str,
    price: Decimal,
    image: str,
) -> Lines:
    """Refresh the display fields of a line; quantity is left alone."""
    return tuple(
        replace(line, title=title, price=price, image=image)
        if line.matches(product_id, owner_id)
        else line
        for line in lines
    )


def increase_line(lines: Lines, product_id: Hashable, owner_id: Hashable) -> Lines:
    return tuple(
        replace(line, quantity=line.quantity + 1)
        if line.matches(product_id, owner_id)
        else line
        for line in lines
    )


def decrease_line(lines: Lines, product_id: Hashable, owner_id: Hashable) -> Lines:
    result: List[CartLine] = []
    for line in lines:
        if not line.matches(product_id, owner_id):
            result.append(line)
        elif line.quantity > 1:
            result.append(replace(line, quantity=line.quantity - 1))
        # quantity 1 drops the line; no zero-quantity lines
    return tuple(result)


def remove_line(lines: Lines, product_id: Hashable, owner_id: Hashable) -> Lines:
    return tuple(line for line in lines if not line.matches(product_id, owner_id))


def clear_owner(lines: Lines, owner_id: Hashable) -> Lines:
    return tuple(line for line in lines if line.owner_id != owner_id)


class CartStore:
    """
    Observable container for cart lines shared by every cart consumer.

    State is an immutable tuple that is swapped wholesale on each change, so
    a reader holding ``store.lines`` never sees a half-applied mutation.
    Derived views are recomputed on every call.
    """

    def __init__(self, lines: Iterable[CartLine] = ()):
        self._lines: Lines = tuple(lines)
        self._subscribers: List[Subscriber] = []

    @property
    def lines(self) -> Lines:
        return self._lines

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def replace(self, lines: Iterable[CartLine]) -> None:
        self._lines = tuple(lines)
        for callback in list(self._subscribers):
            callback(self._lines)

    def snapshot(self) -> CartSnapshot:
        return CartSnapshot(lines=self._lines)

    def restore(self, snapshot: CartSnapshot) -> None:
        logger.debug("Restoring snapshot", lines=len(snapshot.lines))
        self.replace(snapshot.lines)

    def apply_add(self, product_id, owner_id, *, title="", price=Decimal("0"), image="") -> None:
        self.replace(
            add_line(self._lines, product_id, owner_id, title=title, price=price, image=image)
        )

    def apply_details(self, product_id, owner_id, *, title, price, image) -> None:
        self.replace(
            describe_line(self._lines, product_id, owner_id, title=title, price=price, image=image)
        )

    def apply_increase(self, product_id, owner_id) -> None:
        self.replace(increase_line(self._lines, product_id, owner_id))

    def apply_decrease(self, product_id, owner_id) -> None:
        self.replace(decrease_line(self._lines, product_id, owner_id))

    def apply_remove(self, product_id, owner_id) -> None:
        self.replace(remove_line(self._lines, product_id, owner_id))

    def apply_clear(self, owner_id) -> None:
        self.replace(clear_owner(self._lines, owner_id))

    def lines_for(self, owner_id) -> Lines:
        return tuple(line for line in self._lines if line.owner_id == owner_id)

    def total_items(self, owner_id) -> int:
        return sum(line.quantity for line in self.lines_for(owner_id))

    def total_price(self, owner_id) -> Decimal:
        return sum((line.subtotal for line in self.lines_for(owner_id)), Decimal("0"))
