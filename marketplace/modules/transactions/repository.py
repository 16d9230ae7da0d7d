"""Repository protocol for transactions."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Protocol, Sequence

from .models import Transaction, TransactionDetail


class TransactionRepository(Protocol):
    async def get_by_id(self, transaction_id: str, *, for_update: bool = False) -> Transaction | None:
        ...

    async def get_detail(self, transaction_id: str) -> TransactionDetail | None:
        ...

    async def list_details(
        self,
        *,
        user_id: str | None = None,
        status: str | None = None,
    ) -> Sequence[TransactionDetail]:
        ...

    async def create(self, *, user_id: str, item_id: str, quantity: int, total: int) -> Transaction:
        ...

    async def transition_status(
        self,
        transaction_id: str,
        *,
        from_status: str,
        to_status: str,
        changed_at: datetime,
    ) -> Transaction | None:
        """Move ``from_status`` to ``to_status``; ``None`` when the row is not in ``from_status``."""
        ...

    async def delete(self, transaction_id: str, *, allowed_statuses: Iterable[str]) -> Transaction | None:
        ...
