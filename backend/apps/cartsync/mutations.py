from dataclasses import dataclass
from enum import Enum
from typing import Hashable

from .state import CartSnapshot


class MutationKind(str, Enum):
    ADD = "add"
    INCREASE = "increase"
    DECREASE = "decrease"
    REMOVE = "remove"


@dataclass(frozen=True)
class PendingMutation:
    """An optimistic change that is waiting on the remote call.

    ``snapshot`` is the full store state captured just before the change was
    applied; it becomes the state again if the remote call fails.
    """

    kind: MutationKind
    product_id: Hashable
    owner_id: Hashable
    snapshot: CartSnapshot
