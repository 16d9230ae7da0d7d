"""Domain models for purchase transactions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from marketplace.modules.items.models import Item
from marketplace.modules.users.models import User

STATUS_PENDING = "pending"
STATUS_PAID = "paid"
STATUS_CANCELLED = "cancelled"
STATUSES = frozenset({STATUS_PENDING, STATUS_PAID, STATUS_CANCELLED})
# paid transactions keep their settlement, so only these may be removed
DELETABLE_STATUSES = frozenset({STATUS_PENDING, STATUS_CANCELLED})


@dataclass(slots=True)
class Transaction:
    id: str
    user_id: str
    item_id: str
    quantity: int
    total: int
    status: str
    created_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    def is_pending(self) -> bool:
        return self.status == STATUS_PENDING


@dataclass(slots=True)
class TransactionDetail:
    """A transaction together with the user and item it references."""

    transaction: Transaction
    user: Optional[User] = None
    item: Optional[Item] = None


@dataclass(slots=True)
class TransactionCreateInput:
    user_id: str
    item_id: str
    quantity: int
