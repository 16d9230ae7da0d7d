"""SQLAlchemy implementation for item repository."""

from __future__ import annotations

from sqlalchemy import delete, exists, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.errors import MarketplaceError
from marketplace.infrastructure.database.concurrency import lock_for_update
from marketplace.infrastructure.database.models import Item as ItemModel
from marketplace.infrastructure.database.models import Transaction as TransactionModel
from marketplace.modules.common import Page
from marketplace.modules.items.exceptions import ItemNameTakenError, StoreReferenceError
from marketplace.modules.items.models import Item, ItemListQuery

from .integrity import is_foreign_key_violation, is_unique_violation

_SORT_COLUMNS = {
    "created_at": ItemModel.created_at,
    "name": ItemModel.name,
    "price": ItemModel.price,
    "stock": ItemModel.stock,
}


class SqlItemRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, item_id: str, *, for_update: bool = False) -> Item | None:
        stmt = select(ItemModel).where(ItemModel.id == item_id)
        if for_update:
            stmt = lock_for_update(stmt)
        result = await self.session.execute(stmt)
        return self._to_domain(result.scalars().first())

    async def list_items(self, query: ItemListQuery) -> Page[Item]:
        conditions = []
        if query.store_id is not None:
            conditions.append(ItemModel.store_id == query.store_id)
        if query.min_price is not None:
            conditions.append(ItemModel.price >= query.min_price)
        if query.max_price is not None:
            conditions.append(ItemModel.price <= query.max_price)
        if query.name:
            conditions.append(ItemModel.name.icontains(query.name, autoescape=True))

        count_stmt = select(func.count()).select_from(ItemModel).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar_one()

        column = _SORT_COLUMNS.get(query.sort_by, ItemModel.created_at)
        ordering = column.asc() if query.sort_order == "asc" else column.desc()
        stmt = (
            select(ItemModel)
            .where(*conditions)
            .order_by(ordering, ItemModel.id)
            .offset(query.offset)
            .limit(query.limit)
        )
        result = await self.session.execute(stmt)
        return Page(
            items=[self._to_domain(model) for model in result.scalars().all()],
            total=int(total),
            page=query.page,
            limit=query.limit,
        )

    async def create_item(
        self,
        *,
        name: str,
        price: int,
        store_id: str,
        stock: int,
        image_url: str | None,
    ) -> Item:
        item = ItemModel(name=name, price=price, store_id=store_id, stock=stock, image_url=image_url)
        self.session.add(item)
        await self._flush()
        await self.session.refresh(item)
        return self._to_domain(item)

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
        stmt = (
            update(ItemModel)
            .where(ItemModel.id == item_id)
            .values(name=name, price=price, store_id=store_id, stock=stock, image_url=image_url)
            .execution_options(synchronize_session="fetch")
            .returning(ItemModel)
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as exc:
            translated = self._translate(exc)
            if translated is None:
                raise
            raise translated from exc
        return self._to_domain(result.scalars().first())

    async def delete_item(self, item_id: str) -> Item | None:
        stmt = (
            delete(ItemModel)
            .where(ItemModel.id == item_id)
            .returning(ItemModel)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return self._to_domain(result.scalars().first())

    async def adjust_stock(self, item_id: str, delta: int) -> Item | None:
        stmt = (
            update(ItemModel)
            .where(ItemModel.id == item_id, ItemModel.stock + delta >= 0)
            .values(stock=ItemModel.stock + delta)
            .execution_options(synchronize_session="fetch")
            .returning(ItemModel)
        )
        result = await self.session.execute(stmt)
        return self._to_domain(result.scalars().first())

    async def has_transactions(self, item_id: str) -> bool:
        result = await self.session.execute(select(exists().where(TransactionModel.item_id == item_id)))
        return bool(result.scalar())

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            translated = self._translate(exc)
            if translated is None:
                raise
            raise translated from exc

    @staticmethod
    def _translate(exc: IntegrityError) -> MarketplaceError | None:
        if is_unique_violation(exc):
            return ItemNameTakenError()
        if is_foreign_key_violation(exc):
            return StoreReferenceError()
        return None

    @staticmethod
    def _to_domain(model: ItemModel | None) -> Item | None:
        if model is None:
            return None
        return Item(
            id=str(model.id),
            name=model.name,
            price=int(model.price),
            store_id=model.store_id,
            stock=int(model.stock or 0),
            image_url=model.image_url,
            created_at=model.created_at,
        )
