"""SQLAlchemy implementation for store repository."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import delete, exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.infrastructure.database.models import Item as ItemModel
from marketplace.infrastructure.database.models import Store as StoreModel
from marketplace.infrastructure.database.models import User as UserModel
from marketplace.modules.stores.models import Store


class SqlStoreRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, store_id: str) -> Store | None:
        stmt = select(StoreModel).where(StoreModel.id == store_id)
        result = await self.session.execute(stmt)
        return self._to_domain(result.scalars().first())

    async def list_stores(self) -> Sequence[Store]:
        stmt = select(StoreModel).order_by(StoreModel.name, StoreModel.id)
        result = await self.session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def create_store(self, *, name: str, address: str) -> Store:
        store = StoreModel(name=name, address=address)
        self.session.add(store)
        await self.session.flush()
        await self.session.refresh(store)
        return self._to_domain(store)

    async def update_store(self, store_id: str, *, name: str, address: str) -> Store | None:
        stmt = (
            update(StoreModel)
            .where(StoreModel.id == store_id)
            .values(name=name, address=address)
            .execution_options(synchronize_session="fetch")
            .returning(StoreModel)
        )
        result = await self.session.execute(stmt)
        return self._to_domain(result.scalars().first())

    async def delete_store(self, store_id: str) -> Store | None:
        await self.session.execute(
            update(UserModel)
            .where(UserModel.store_id == store_id)
            .values(store_id=None)
            .execution_options(synchronize_session="fetch")
        )
        stmt = (
            delete(StoreModel)
            .where(StoreModel.id == store_id)
            .returning(StoreModel)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return self._to_domain(result.scalars().first())

    async def has_items(self, store_id: str) -> bool:
        result = await self.session.execute(select(exists().where(ItemModel.store_id == store_id)))
        return bool(result.scalar())

    @staticmethod
    def _to_domain(model: StoreModel | None) -> Store | None:
        if model is None:
            return None
        return Store(
            id=str(model.id),
            name=model.name,
            address=model.address,
            created_at=model.created_at,
        )
