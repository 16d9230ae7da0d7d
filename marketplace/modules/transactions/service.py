"""Purchase lifecycle: create, pay, cancel and delete transactions.

A transaction is created ``pending`` with its total frozen at the item's
price. Nothing is reserved at creation; ``pay`` re-checks balance and stock
and settles all three rows (user balance, item stock, transaction status) in
one database transaction. Every settlement write is a conditional update, so
concurrent payments can never push a balance or a stock level below zero.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.errors import InsufficientBalance, InsufficientStock, ValidationError
from marketplace.core.validation import MAX_QUANTITY, ensure_int
from marketplace.infrastructure.database.concurrency import run_with_retry
from marketplace.modules.items import ItemNotFoundError
from marketplace.modules.items.repository import ItemRepository
from marketplace.modules.users import User, UserNotFoundError
from marketplace.modules.users.repository import UserRepository

from .exceptions import (
    InvalidTransactionStateError,
    PaidTransactionDeletionError,
    TransactionNotFoundError,
    TransactionPermissionError,
)
from .models import (
    DELETABLE_STATUSES,
    STATUS_CANCELLED,
    STATUS_PAID,
    STATUS_PENDING,
    STATUSES,
    Transaction,
    TransactionCreateInput,
    TransactionDetail,
)
from .repository import TransactionRepository

logger = logging.getLogger(__name__)


class TransactionService:
    def __init__(
        self,
        session: AsyncSession,
        transactions: TransactionRepository,
        users: UserRepository,
        items: ItemRepository,
        *,
        retry_attempts: int = 3,
    ) -> None:
        self._session = session
        self._transactions = transactions
        self._users = users
        self._items = items
        self._retry_attempts = retry_attempts

    @classmethod
    def with_session(cls, session: AsyncSession) -> "TransactionService":
        from marketplace.infrastructure.database.repositories import (
            SqlItemRepository,
            SqlTransactionRepository,
            SqlUserRepository,
        )

        return cls(
            session,
            SqlTransactionRepository(session),
            SqlUserRepository(session),
            SqlItemRepository(session),
        )

    async def create(self, payload: TransactionCreateInput, actor: User) -> Transaction:
        if not payload.user_id or not payload.item_id:
            raise ValidationError("User ID, item ID, and quantity are required")
        quantity = ensure_int("Quantity", payload.quantity, minimum=1, maximum=MAX_QUANTITY)
        _ensure_owner_or_admin(actor, payload.user_id)

        user = await self._users.get_by_id(payload.user_id)
        if user is None:
            raise UserNotFoundError()
        item = await self._items.get_by_id(payload.item_id)
        if item is None:
            raise ItemNotFoundError()
        if quantity > item.stock:
            raise InsufficientStock(f"Insufficient stock: requested {quantity}, available {item.stock}")

        transaction = await self._transactions.create(
            user_id=user.id,
            item_id=item.id,
            quantity=quantity,
            total=item.price * quantity,
        )
        logger.info(
            "Transaction %s created: user %s, item %s, quantity %s, total %s",
            transaction.id,
            user.id,
            item.id,
            quantity,
            transaction.total,
        )
        return transaction

    async def pay(self, transaction_id: str, actor: User) -> Transaction:
        current = await self._get(transaction_id)
        _ensure_owner_or_admin(actor, current.user_id)
        return await run_with_retry(
            self._session,
            lambda: self._settle(transaction_id),
            attempts=self._retry_attempts,
        )

    async def _settle(self, transaction_id: str) -> Transaction:
        transaction = await self._transactions.get_by_id(transaction_id, for_update=True)
        if transaction is None:
            raise TransactionNotFoundError()
        if not transaction.is_pending():
            raise InvalidTransactionStateError(f"Transaction is already {transaction.status}")

        user = await self._users.get_by_id(transaction.user_id, for_update=True)
        if user is None:
            raise UserNotFoundError()
        item = await self._items.get_by_id(transaction.item_id, for_update=True)
        if item is None:
            raise ItemNotFoundError()
        if user.balance < transaction.total:
            raise InsufficientBalance(
                f"Insufficient balance: required {transaction.total}, available {user.balance}"
            )
        if item.stock < transaction.quantity:
            raise InsufficientStock(
                f"Insufficient stock: requested {transaction.quantity}, available {item.stock}"
            )

        # conditional writes; a concurrent settlement shows up as a missing row
        try:
            paid = await self._transactions.transition_status(
                transaction_id,
                from_status=STATUS_PENDING,
                to_status=STATUS_PAID,
                changed_at=datetime.now(timezone.utc),
            )
            if paid is None:
                raise InvalidTransactionStateError()
            if await self._users.adjust_balance(user.id, -transaction.total) is None:
                raise InsufficientBalance()
            if await self._items.adjust_stock(item.id, -transaction.quantity) is None:
                raise InsufficientStock()
        except (InvalidTransactionStateError, InsufficientBalance, InsufficientStock) as exc:
            await self._session.rollback()
            logger.warning("Settlement of transaction %s rejected: %s", transaction_id, exc.message)
            raise

        logger.info(
            "Transaction %s paid: user %s debited %s, item %s stock -%s",
            transaction_id,
            user.id,
            transaction.total,
            item.id,
            transaction.quantity,
        )
        return paid

    async def cancel(self, transaction_id: str, actor: User) -> Transaction:
        current = await self._get(transaction_id)
        _ensure_owner_or_admin(actor, current.user_id)
        if not current.is_pending():
            raise InvalidTransactionStateError(f"Transaction is already {current.status}")

        cancelled = await self._transactions.transition_status(
            transaction_id,
            from_status=STATUS_PENDING,
            to_status=STATUS_CANCELLED,
            changed_at=datetime.now(timezone.utc),
        )
        if cancelled is None:
            raise InvalidTransactionStateError()
        logger.info("Transaction %s cancelled", transaction_id)
        return cancelled

    async def delete(self, transaction_id: str, actor: User) -> Transaction:
        current = await self._get(transaction_id)
        _ensure_owner_or_admin(actor, current.user_id)
        if current.status == STATUS_PAID:
            raise PaidTransactionDeletionError()

        deleted = await self._transactions.delete(transaction_id, allowed_statuses=DELETABLE_STATUSES)
        if deleted is None:
            # paid between the read and the delete
            if await self._transactions.get_by_id(transaction_id) is None:
                raise TransactionNotFoundError()
            raise PaidTransactionDeletionError()
        logger.info("Transaction %s deleted", transaction_id)
        return deleted

    async def get(self, transaction_id: str, actor: User) -> TransactionDetail:
        detail = await self._transactions.get_detail(transaction_id)
        if detail is None:
            raise TransactionNotFoundError()
        _ensure_owner_or_admin(actor, detail.transaction.user_id)
        return detail

    async def list_transactions(
        self,
        actor: User,
        *,
        user_id: str | None = None,
        status: str | None = None,
    ) -> Sequence[TransactionDetail]:
        if status is not None and status not in STATUSES:
            raise ValidationError(f"status must be one of: {', '.join(sorted(STATUSES))}")
        if not actor.is_admin():
            if user_id is not None and user_id != actor.id:
                raise TransactionPermissionError()
            user_id = actor.id
        return await self._transactions.list_details(user_id=user_id, status=status)

    async def _get(self, transaction_id: str) -> Transaction:
        transaction = await self._transactions.get_by_id(transaction_id)
        if transaction is None:
            raise TransactionNotFoundError()
        return transaction


def _ensure_owner_or_admin(actor: User, user_id: str) -> None:
    if actor.id != user_id and not actor.is_admin():
        raise TransactionPermissionError()
