from dataclasses import dataclass
from typing import Any, Optional


def coerce_id(raw: Any) -> Optional[int]:
    """Return ``raw`` as a positive int, or ``None`` when it is not one."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = int(raw)
    except (ValueError, TypeError):
        return None
    # int("1.5") fails but int(1.5) truncates; reject non-integral floats.
    if isinstance(raw, float) and raw != value:
        return None
    return value if value > 0 else None


@dataclass(frozen=True)
class CartLineCommand:
    product_id: int
    owner_id: int

    @staticmethod
    def from_raw(product_id: Any, owner_id: Any) -> Optional["CartLineCommand"]:
        pid = coerce_id(product_id)
        oid = coerce_id(owner_id)
        if pid is None or oid is None:
            return None
        return CartLineCommand(product_id=pid, owner_id=oid)
