from .engine import CartSyncEngine, ProductUnavailableError
from .mutations import MutationKind, PendingMutation
from .state import CartLine, CartSnapshot, CartStore

__all__ = [
    "CartLine",
    "CartSnapshot",
    "CartStore",
    "CartSyncEngine",
    "MutationKind",
    "PendingMutation",
    "ProductUnavailableError",
]
