"""Repository protocol for items."""

from __future__ import annotations

from typing import Protocol

from marketplace.modules.common import Page

from .models import Item, ItemListQuery


class ItemRepository(Protocol):
    async def get_by_id(self, item_id: str, *, for_update: bool = False) -> Item | None:
        ...

    async def list_items(self, query: ItemListQuery) -> Page[Item]:
        ...

    async def create_item(
        self,
        *,
        name: str,
        price: int,
        store_id: str,
        stock: int,
        image_url: str | None,
    ) -> Item:
        ...

    async def update_item(
        self,
        item_id: str,
        *,
        name: str,
        price: int,
        store_id: str,
        stock: int,
        image_url: str | None,
    ) -> Item | None:
        ...

    async def delete_item(self, item_id: str) -> Item | None:
        ...

    async def adjust_stock(self, item_id: str, delta: int) -> Item | None:
        """Add ``delta`` unless the stock would drop below zero; ``None`` if no row changed."""
        ...

    async def has_transactions(self, item_id: str) -> bool:
        ...
