"""Store domain service."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.cache import TTLCache
from marketplace.core.validation import sanitize_text
from marketplace.infrastructure.database import after_commit
from marketplace.modules.common import UNSET

from .exceptions import StoreHasItemsError, StoreNotFoundError
from .models import Store, StoreCreateInput, StoreUpdateInput
from .repository import StoreRepository

logger = logging.getLogger(__name__)

_ALL_STORES = ("stores", "all")


def _store_key(store_id: str) -> tuple[str, str]:
    return ("store", store_id)


@dataclass(slots=True)
class StoreService:
    repository: StoreRepository
    cache: Optional[TTLCache] = None
    session: Optional[AsyncSession] = None

    @classmethod
    def with_session(cls, session: AsyncSession, cache: TTLCache | None = None) -> "StoreService":
        from marketplace.infrastructure.database.repositories.store_repository import SqlStoreRepository

        return cls(SqlStoreRepository(session), cache, session)

    async def get_store(self, store_id: str) -> Store:
        if self.cache is not None:
            cached = self.cache.get(_store_key(store_id))
            if cached is not None:
                return cached
        store = await self.repository.get_by_id(store_id)
        if store is None:
            raise StoreNotFoundError()
        if self.cache is not None:
            self.cache.set(_store_key(store_id), store)
        return store

    async def exists(self, store_id: str) -> bool:
        try:
            await self.get_store(store_id)
        except StoreNotFoundError:
            return False
        return True

    async def list_stores(self) -> Sequence[Store]:
        if self.cache is not None:
            cached = self.cache.get(_ALL_STORES)
            if cached is not None:
                return list(cached)
        stores = list(await self.repository.list_stores())
        if self.cache is not None:
            self.cache.set(_ALL_STORES, tuple(stores))
        return stores

    async def create_store(self, payload: StoreCreateInput) -> Store:
        store = await self.repository.create_store(
            name=sanitize_text(payload.name, field="Store name", max_length=100),
            address=sanitize_text(payload.address, field="Address", max_length=500),
        )
        self._invalidate(store.id)
        logger.info("Created store %s", store.id)
        return store

    async def update_store(self, store_id: str, payload: StoreUpdateInput) -> Store:
        current = await self.repository.get_by_id(store_id)
        if current is None:
            raise StoreNotFoundError()

        name = current.name
        if payload.name is not UNSET and payload.name is not None:
            name = sanitize_text(payload.name, field="Store name", max_length=100)
        address = current.address
        if payload.address is not UNSET and payload.address is not None:
            address = sanitize_text(payload.address, field="Address", max_length=500)

        updated = await self.repository.update_store(store_id, name=name, address=address)
        self._invalidate(store_id)
        if updated is None:
            raise StoreNotFoundError()
        return updated

    async def delete_store(self, store_id: str) -> Store:
        if await self.repository.get_by_id(store_id) is None:
            raise StoreNotFoundError()
        if await self.repository.has_items(store_id):
            raise StoreHasItemsError()
        deleted = await self.repository.delete_store(store_id)
        self._invalidate(store_id)
        if deleted is None:
            raise StoreNotFoundError()
        logger.info("Deleted store %s", store_id)
        return deleted

    def _invalidate(self, store_id: str) -> None:
        if self.cache is None:
            return
        self._evict(store_id)
        # readers may re-cache the old row until this transaction commits
        if self.session is not None:
            after_commit(self.session, lambda: self._evict(store_id))

    def _evict(self, store_id: str) -> None:
        self.cache.delete(_store_key(store_id))
        self.cache.delete(_ALL_STORES)
