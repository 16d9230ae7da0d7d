"""Item domain service."""

from __future__ import annotations

import dataclasses
import logging

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.cache import TTLCache
from marketplace.core.errors import MarketplaceError, ValidationError
from marketplace.core.validation import MAX_PAGE_SIZE, MAX_PRICE, MAX_STOCK, ensure_int, sanitize_text
from marketplace.infrastructure.storage import ImageStore
from marketplace.modules.common import UNSET, Page
from marketplace.modules.stores import StoreService
from marketplace.modules.users import User

from .exceptions import (
    ItemHasTransactionsError,
    ItemNotFoundError,
    ItemPermissionError,
    StoreReferenceError,
)
from .models import SORT_ORDERS, SORTABLE_FIELDS, Item, ItemCreateInput, ItemListQuery, ItemUpdateInput
from .repository import ItemRepository

logger = logging.getLogger(__name__)


class ItemService:
    """Item catalogue use cases, including image handling."""

    def __init__(
        self,
        repository: ItemRepository,
        stores: StoreService,
        image_store: ImageStore | None = None,
    ) -> None:
        self._repository = repository
        self._stores = stores
        self._image_store = image_store
        self._stale_images: list[str] = []

    @classmethod
    def with_session(
        cls,
        session: AsyncSession,
        *,
        image_store: ImageStore | None = None,
        cache: TTLCache | None = None,
    ) -> "ItemService":
        from marketplace.infrastructure.database.repositories.item_repository import SqlItemRepository

        return cls(SqlItemRepository(session), StoreService.with_session(session, cache), image_store)

    async def get_item(self, item_id: str) -> Item:
        item = await self._repository.get_by_id(item_id)
        if item is None:
            raise ItemNotFoundError()
        return item

    async def list_items(self, query: ItemListQuery) -> Page[Item]:
        ensure_int("Page", query.page, minimum=1)
        ensure_int("Limit", query.limit, minimum=1, maximum=MAX_PAGE_SIZE)
        query = dataclasses.replace(query, sort_order=query.sort_order.lower())
        if query.sort_by not in SORTABLE_FIELDS:
            raise ValidationError(f"sort_by must be one of: {', '.join(sorted(SORTABLE_FIELDS))}")
        if query.sort_order not in SORT_ORDERS:
            raise ValidationError("sort_order must be 'asc' or 'desc'")
        if query.min_price is not None:
            ensure_int("min_price", query.min_price, minimum=0)
        if query.max_price is not None:
            ensure_int("max_price", query.max_price, minimum=0)
        if query.name is not None:
            name = sanitize_text(query.name, field="Name filter") if query.name.strip() else None
            query = dataclasses.replace(query, name=name)
        return await self._repository.list_items(query)

    async def list_by_store(self, store_id: str, *, page: int = 1, limit: int = 10) -> Page[Item]:
        return await self.list_items(ItemListQuery(page=page, limit=limit, store_id=store_id))

    async def create_item(
        self,
        payload: ItemCreateInput,
        actor: User,
        image: UploadFile | None = None,
    ) -> Item:
        name = sanitize_text(payload.name, field="Item name", max_length=100)
        price = ensure_int("Price", payload.price, minimum=0, maximum=MAX_PRICE)
        stock = ensure_int("Stock", payload.stock, minimum=0, maximum=MAX_STOCK)
        if not actor.manages_store(payload.store_id):
            raise ItemPermissionError()
        if not await self._stores.exists(payload.store_id):
            raise StoreReferenceError()

        image_url = await self._upload(image)
        try:
            item = await self._repository.create_item(
                name=name,
                price=price,
                store_id=payload.store_id,
                stock=stock,
                image_url=image_url,
            )
        except Exception:
            await self._discard_image(image_url)
            raise

        logger.info("Item %s created in store %s", item.id, item.store_id)
        return item

    async def update_item(
        self,
        item_id: str,
        payload: ItemUpdateInput,
        actor: User,
        image: UploadFile | None = None,
    ) -> Item:
        current = await self.get_item(item_id)
        if not actor.manages_store(current.store_id):
            raise ItemPermissionError()

        name = current.name
        if payload.name is not UNSET and payload.name is not None:
            name = sanitize_text(payload.name, field="Item name", max_length=100)
        price = current.price
        if payload.price is not UNSET and payload.price is not None:
            price = ensure_int("Price", payload.price, minimum=0, maximum=MAX_PRICE)
        stock = current.stock
        if payload.stock is not UNSET and payload.stock is not None:
            stock = ensure_int("Stock", payload.stock, minimum=0, maximum=MAX_STOCK)
        store_id = current.store_id
        if payload.store_id is not UNSET and payload.store_id is not None and payload.store_id != current.store_id:
            if not actor.manages_store(payload.store_id):
                raise ItemPermissionError()
            if not await self._stores.exists(payload.store_id):
                raise StoreReferenceError()
            store_id = payload.store_id

        new_image_url = await self._upload(image)
        try:
            updated = await self._repository.update_item(
                item_id,
                name=name,
                price=price,
                store_id=store_id,
                stock=stock,
                image_url=new_image_url or current.image_url,
            )
        except Exception:
            await self._discard_image(new_image_url)
            raise
        if updated is None:
            await self._discard_image(new_image_url)
            raise ItemNotFoundError()

        if new_image_url and current.image_url:
            self._stale_images.append(current.image_url)
        logger.info("Item %s updated", item_id)
        return updated

    async def delete_item(self, item_id: str, actor: User) -> Item:
        current = await self.get_item(item_id)
        if not actor.manages_store(current.store_id):
            raise ItemPermissionError()
        if await self._repository.has_transactions(item_id):
            raise ItemHasTransactionsError()

        deleted = await self._repository.delete_item(item_id)
        if deleted is None:
            raise ItemNotFoundError()
        if deleted.image_url:
            self._stale_images.append(deleted.image_url)
        logger.info("Item %s deleted", item_id)
        return deleted

    async def discard_stale_images(self) -> None:
        """Delete images replaced or orphaned by this service's writes.

        Call only after the transaction holding those writes has committed.
        """
        while self._stale_images:
            await self._discard_image(self._stale_images.pop())

    async def _upload(self, image: UploadFile | None) -> str | None:
        if image is None:
            return None
        if self._image_store is None:
            raise ValidationError("Image uploads are not enabled")
        return await self._image_store.save(image)

    async def _discard_image(self, url: str | None) -> None:
        if not url or self._image_store is None:
            return
        try:
            await self._image_store.delete(url)
        except MarketplaceError as exc:
            logger.warning("Failed to delete image %s: %s", url, exc.message)
