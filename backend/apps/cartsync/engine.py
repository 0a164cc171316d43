from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Awaitable, Callable, Dict, Hashable, Iterable, List, Optional

from apps.common import get_logger
from .mutations import MutationKind, PendingMutation
from .protocols import CartGatewayProtocol, ProductLookupProtocol
from .state import CartLine, CartStore, Lines

logger = get_logger(__name__).bind(component="cartsync", layer="engine")


class ProductUnavailableError(LookupError):
    """Raised by ``add_item`` when the product lookup finds nothing."""

    def __init__(self, product_id: Hashable):
        super().__init__(f"Product {product_id} is not available")
        self.product_id = product_id


def _display_fields(product: Any) -> Dict[str, Any]:
    return {
        "title": product.title,
        "price": Decimal(str(product.price)),
        "image": product.image or "",
    }


class CartSyncEngine:
    """
    Optimistic cart operations for one owner, reconciled with a remote gateway.

    Each mutation snapshots the store, applies its change immediately and
    then awaits the gateway. Success keeps the optimistic state; failure
    restores the snapshot and re-raises the gateway's exception unchanged.

    Mutations are not serialized. Concurrent operations each hold their own
    snapshot, so a failing operation that settles last restores a state that
    predates any concurrent success.
    """

    def __init__(
        self,
        store: CartStore,
        gateway: CartGatewayProtocol,
        products: ProductLookupProtocol,
        owner_id: Optional[Hashable] = None,
    ):
        self.store = store
        self.gateway = gateway
        self.products = products
        self.owner_id = owner_id
        self.loading: Dict[str, bool] = {kind.value: False for kind in MutationKind}
        self.pending: List[PendingMutation] = []
        self.logger = logger.bind(owner_id=owner_id)

    @property
    def items(self) -> Lines:
        if not self._owner_present():
            return ()
        return self.store.lines_for(self.owner_id)

    @property
    def total_items(self) -> int:
        if not self._owner_present():
            return 0
        return self.store.total_items(self.owner_id)

    @property
    def total_price(self) -> Decimal:
        if not self._owner_present():
            return Decimal("0")
        return self.store.total_price(self.owner_id)

    def _owner_present(self) -> bool:
        return self.owner_id is not None and self.owner_id != ""

    def _require_owner(self, action: str) -> bool:
        if self._owner_present():
            return True
        self.logger.warning("Cart action ignored without an owner", action=action)
        return False

    @contextmanager
    def _in_flight(self, kind: MutationKind):
        self.loading[kind.value] = True
        try:
            yield
        finally:
            self.loading[kind.value] = False

    async def _mutate(
        self,
        kind: MutationKind,
        product_id: Hashable,
        apply: Callable[[], None],
        call: Callable[[Hashable, Hashable], Awaitable[Any]],
    ) -> Any:
        pending = PendingMutation(
            kind=kind,
            product_id=product_id,
            owner_id=self.owner_id,
            snapshot=self.store.snapshot(),
        )
        apply()
        self.pending.append(pending)
        try:
            result = await call(product_id, self.owner_id)
        except BaseException as exc:
            # Cancellation included: the optimistic change never outlives the call.
            self.store.restore(pending.snapshot)
            self.logger.error(
                "Cart mutation rolled back",
                exc=exc,
                kind=kind.value,
                product_id=product_id,
            )
            raise
        finally:
            self.pending.remove(pending)
        if kind in (MutationKind.ADD, MutationKind.REMOVE):
            self.logger.success("Cart mutation confirmed", kind=kind.value, product_id=product_id)
        else:
            self.logger.debug("Cart mutation confirmed", kind=kind.value, product_id=product_id)
        return result

    async def add_item(self, product_id: Hashable, product: Any = None) -> Any:
        """
        Add one unit of a product, creating the line when needed.

        The line is applied before anything is awaited. When ``product`` is
        not given, its display fields are resolved through the lookup after
        the optimistic change; an unknown product rolls the line back with
        ``ProductUnavailableError`` and the gateway is never called.
        """
        if not self._require_owner(MutationKind.ADD.value):
            return None

        async def resolve_and_add(pid: Hashable, owner_id: Hashable) -> Any:
            if product is None:
                found = await self.products.get(pid)
                if found is None:
                    self.logger.warning("Cannot add unknown product", product_id=pid)
                    raise ProductUnavailableError(pid)
                self.store.apply_details(pid, owner_id, **_display_fields(found))
            return await self.gateway.add(pid, owner_id)

        fields = _display_fields(product) if product is not None else {}
        with self._in_flight(MutationKind.ADD):
            return await self._mutate(
                MutationKind.ADD,
                product_id,
                lambda: self.store.apply_add(product_id, self.owner_id, **fields),
                resolve_and_add,
            )

    async def increase_quantity(self, product_id: Hashable) -> Any:
        if not self._require_owner(MutationKind.INCREASE.value):
            return None
        with self._in_flight(MutationKind.INCREASE):
            return await self._mutate(
                MutationKind.INCREASE,
                product_id,
                lambda: self.store.apply_increase(product_id, self.owner_id),
                self.gateway.increase,
            )

    async def decrease_quantity(self, product_id: Hashable) -> Any:
        """Decrement a line; a line at quantity 1 disappears.

        A missing line leaves the state untouched but the remote call still
        runs and its outcome decides whether to roll back.
        """
        if not self._require_owner(MutationKind.DECREASE.value):
            return None
        with self._in_flight(MutationKind.DECREASE):
            return await self._mutate(
                MutationKind.DECREASE,
                product_id,
                lambda: self.store.apply_decrease(product_id, self.owner_id),
                self.gateway.decrease,
            )

    async def remove_item(self, product_id: Hashable) -> Any:
        if not self._require_owner(MutationKind.REMOVE.value):
            return None
        with self._in_flight(MutationKind.REMOVE):
            return await self._mutate(
                MutationKind.REMOVE,
                product_id,
                lambda: self.store.apply_remove(product_id, self.owner_id),
                self.gateway.remove,
            )

    async def clear_cart(self, persist: bool = False) -> None:
        """
        Drop the owner's lines without a snapshot.

        Used after checkout, when the server has already emptied the cart.
        With ``persist=True`` the gateway is asked to clear as well; its
        errors propagate and the local state stays cleared.
        """
        if not self._require_owner("clear"):
            return
        self.store.apply_clear(self.owner_id)
        self.logger.info("Cart cleared locally", persist=persist)
        if persist:
            await self.gateway.clear(self.owner_id)

    async def load(self) -> Lines:
        """Replace the owner's lines with the gateway's copy."""
        if not self._require_owner("load"):
            return ()
        fetched = tuple(await self.gateway.fetch(self.owner_id))
        others = tuple(line for line in self.store.lines if line.owner_id != self.owner_id)
        self.store.replace(others + fetched)
        self.logger.debug("Cart hydrated", lines=len(fetched))
        return self.items

    def set_lines(self, lines: Iterable[CartLine]) -> None:
        self.store.replace(lines)
