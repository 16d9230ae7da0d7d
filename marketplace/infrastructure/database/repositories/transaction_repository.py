"""SQLAlchemy implementation for transaction repository."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.infrastructure.database.concurrency import lock_for_update
from marketplace.infrastructure.database.models import Item as ItemModel
from marketplace.infrastructure.database.models import Transaction as TransactionModel
from marketplace.infrastructure.database.models import User as UserModel
from marketplace.modules.transactions.models import (
    STATUS_CANCELLED,
    STATUS_PAID,
    Transaction,
    TransactionDetail,
)

from .item_repository import SqlItemRepository
from .user_repository import SqlUserRepository

_TIMESTAMP_COLUMNS = {
    STATUS_PAID: "paid_at",
    STATUS_CANCELLED: "cancelled_at",
}


class SqlTransactionRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, transaction_id: str, *, for_update: bool = False) -> Transaction | None:
        stmt = select(TransactionModel).where(TransactionModel.id == transaction_id)
        if for_update:
            stmt = lock_for_update(stmt)
        result = await self.session.execute(stmt)
        return self._to_domain(result.scalars().first())

    async def get_detail(self, transaction_id: str) -> TransactionDetail | None:
        stmt = self._detail_query().where(TransactionModel.id == transaction_id)
        result = await self.session.execute(stmt)
        row = result.first()
        return self._to_detail(row) if row is not None else None

    async def list_details(
        self,
        *,
        user_id: str | None = None,
        status: str | None = None,
    ) -> Sequence[TransactionDetail]:
        stmt = self._detail_query()
        if user_id is not None:
            stmt = stmt.where(TransactionModel.user_id == user_id)
        if status is not None:
            stmt = stmt.where(TransactionModel.status == status)
        stmt = stmt.order_by(TransactionModel.created_at.desc(), TransactionModel.id)
        result = await self.session.execute(stmt)
        return [self._to_detail(row) for row in result.all()]

    async def create(self, *, user_id: str, item_id: str, quantity: int, total: int) -> Transaction:
        transaction = TransactionModel(user_id=user_id, item_id=item_id, quantity=quantity, total=total)
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return self._to_domain(transaction)

    async def transition_status(
        self,
        transaction_id: str,
        *,
        from_status: str,
        to_status: str,
        changed_at: datetime,
    ) -> Transaction | None:
        values: dict[str, object] = {"status": to_status}
        timestamp_column = _TIMESTAMP_COLUMNS.get(to_status)
        if timestamp_column is not None:
            values[timestamp_column] = changed_at
        stmt = (
            update(TransactionModel)
            .where(TransactionModel.id == transaction_id, TransactionModel.status == from_status)
            .values(**values)
            .execution_options(synchronize_session="fetch")
            .returning(TransactionModel)
        )
        result = await self.session.execute(stmt)
        return self._to_domain(result.scalars().first())

    async def delete(self, transaction_id: str, *, allowed_statuses: Iterable[str]) -> Transaction | None:
        stmt = (
            delete(TransactionModel)
            .where(
                TransactionModel.id == transaction_id,
                TransactionModel.status.in_(list(allowed_statuses)),
            )
            .returning(TransactionModel)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return self._to_domain(result.scalars().first())

    @staticmethod
    def _detail_query():
        return (
            select(TransactionModel, UserModel, ItemModel)
            .outerjoin(UserModel, UserModel.id == TransactionModel.user_id)
            .outerjoin(ItemModel, ItemModel.id == TransactionModel.item_id)
        )

    def _to_detail(self, row) -> TransactionDetail:
        transaction, user, item = row
        return TransactionDetail(
            transaction=self._to_domain(transaction),
            user=SqlUserRepository._to_domain(user),
            item=SqlItemRepository._to_domain(item),
        )

    @staticmethod
    def _to_domain(model: TransactionModel | None) -> Transaction | None:
        if model is None:
            return None
        return Transaction(
            id=str(model.id),
            user_id=model.user_id,
            item_id=model.item_id,
            quantity=int(model.quantity),
            total=int(model.total),
            status=model.status,
            created_at=model.created_at,
            paid_at=model.paid_at,
            cancelled_at=model.cancelled_at,
        )
