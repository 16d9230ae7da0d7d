"""SQLAlchemy implementation of the user repository."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import delete, exists, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.infrastructure.database.concurrency import lock_for_update
from marketplace.infrastructure.database.models import Transaction as TransactionModel
from marketplace.infrastructure.database.models import User as UserModel
from marketplace.modules.users.exceptions import EmailAlreadyUsedError, ManagedStoreNotFoundError
from marketplace.modules.users.models import User
from marketplace.modules.users.repository import UserRepository

from .integrity import is_foreign_key_violation, is_unique_violation


class SqlUserRepository(UserRepository):
    """User repository backed by SQLAlchemy models."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: str, *, for_update: bool = False) -> User | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        if for_update:
            stmt = lock_for_update(stmt)
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(UserModel).where(UserModel.email == email)
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalar_one_or_none())

    async def list_users(self) -> Sequence[User]:
        stmt = select(UserModel).order_by(UserModel.created_at.desc(), UserModel.id)
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: str,
        store_id: str | None,
    ) -> User:
        model = UserModel(
            name=name,
            email=email,
            password_hash=password_hash,
            role=role,
            store_id=store_id,
            balance=0,
        )
        self._session.add(model)
        await self._flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def update_user(
        self,
        user_id: str,
        *,
        name: str,
        email: str,
        role: str,
        store_id: str | None,
        password_hash: str | None = None,
    ) -> User | None:
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None

        model.name = name
        model.email = email
        model.role = role
        model.store_id = store_id
        if password_hash is not None:
            model.password_hash = password_hash

        await self._flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def delete_user(self, user_id: str) -> User | None:
        stmt = (
            delete(UserModel)
            .where(UserModel.id == user_id)
            .returning(UserModel)
            .execution_options(synchronize_session="fetch")
        )
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalars().first())

    async def adjust_balance(self, user_id: str, delta: int) -> User | None:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id, UserModel.balance + delta >= 0)
            .values(balance=UserModel.balance + delta)
            .execution_options(synchronize_session="fetch")
            .returning(UserModel)
        )
        result = await self._session.execute(stmt)
        return self._to_domain(result.scalars().first())

    async def has_transactions(self, user_id: str) -> bool:
        stmt = select(exists().where(TransactionModel.user_id == user_id))
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    async def _flush(self) -> None:
        try:
            await self._session.flush()
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise EmailAlreadyUsedError() from exc
            if is_foreign_key_violation(exc):
                raise ManagedStoreNotFoundError() from exc
            raise

    @staticmethod
    def _to_domain(model: UserModel | None) -> User | None:
        if model is None:
            return None
        return User(
            id=str(model.id),
            name=model.name,
            email=model.email,
            role=model.role or "user",
            balance=int(model.balance or 0),
            password_hash=model.password_hash,
            store_id=model.store_id,
            created_at=model.created_at,
        )
