"""Repository protocol for stores."""

from __future__ import annotations

from typing import Protocol, Sequence

from .models import Store


class StoreRepository(Protocol):
    async def get_by_id(self, store_id: str) -> Store | None:
        ...

    async def list_stores(self) -> Sequence[Store]:
        ...

    async def create_store(self, *, name: str, address: str) -> Store:
        ...

    async def update_store(self, store_id: str, *, name: str, address: str) -> Store | None:
        ...

    async def delete_store(self, store_id: str) -> Store | None:
        """Remove the store and detach the users managing it."""
        ...

    async def has_items(self, store_id: str) -> bool:
        ...
