import asyncio

import pytest

from marketplace.core.errors import InsufficientBalance, InsufficientStock
from marketplace.infrastructure.database.repositories import SqlItemRepository, SqlUserRepository
from marketplace.modules.transactions import (
    InvalidTransactionStateError,
    PaidTransactionDeletionError,
    TransactionCreateInput,
    TransactionNotFoundError,
    TransactionPermissionError,
    TransactionService,
)
from marketplace.modules.users import ROLE_ADMIN
from tests.factories import create_item, create_store, create_user


async def _seed(database, *, balance=100, price=30, stock=5):
    async with database.transaction() as session:
        buyer = await create_user(session, "buyer@example.com", balance=balance)
        store = await create_store(session)
        item = await create_item(session, store.id, price=price, stock=stock)
    return buyer, item


async def _create(database, buyer, item, quantity):
    async with database.transaction() as session:
        service = TransactionService.with_session(session)
        return await service.create(
            TransactionCreateInput(user_id=buyer.id, item_id=item.id, quantity=quantity), buyer
        )


async def _pay(database, transaction_id, actor):
    async with database.transaction() as session:
        return await TransactionService.with_session(session).pay(transaction_id, actor)


async def _balances(database, user_id, item_id):
    async with database.transaction() as session:
        user = await SqlUserRepository(session).get_by_id(user_id)
        item = await SqlItemRepository(session).get_by_id(item_id)
    return user.balance, item.stock


def test_purchase_scenario_settles_balance_and_stock(run_with_db):
    async def scenario(database):
        buyer, item = await _seed(database, balance=100, price=30, stock=5)
        created = await _create(database, buyer, item, 2)
        assert created.total == 60
        assert created.status == "pending"

        paid = await _pay(database, created.id, buyer)
        assert paid.status == "paid"
        assert paid.paid_at is not None
        assert await _balances(database, buyer.id, item.id) == (40, 3)

        with pytest.raises(InvalidTransactionStateError):
            await _pay(database, created.id, buyer)
        assert await _balances(database, buyer.id, item.id) == (40, 3)

    run_with_db(scenario)


def test_create_does_not_touch_balance_or_stock(run_with_db):
    async def scenario(database):
        buyer, item = await _seed(database)
        first = await _create(database, buyer, item, 1)
        second = await _create(database, buyer, item, 1)
        assert first.id != second.id

        async with database.transaction() as session:
            reloaded = await TransactionService.with_session(session).get(first.id, buyer)
        assert reloaded.transaction.status == "pending"
        assert reloaded.transaction.total == first.total
        assert await _balances(database, buyer.id, item.id) == (100, 5)

    run_with_db(scenario)


def test_create_rejects_quantity_above_stock(run_with_db):
    async def scenario(database):
        buyer, item = await _seed(database, stock=2)
        with pytest.raises(InsufficientStock):
            await _create(database, buyer, item, 3)

        async with database.transaction() as session:
            rows = await TransactionService.with_session(session).list_transactions(buyer)
        assert rows == []

    run_with_db(scenario)


def test_pay_with_insufficient_balance_changes_nothing(run_with_db):
    async def scenario(database):
        buyer, item = await _seed(database, balance=50, price=30, stock=5)
        created = await _create(database, buyer, item, 2)

        with pytest.raises(InsufficientBalance):
            await _pay(database, created.id, buyer)

        assert await _balances(database, buyer.id, item.id) == (50, 5)
        async with database.transaction() as session:
            detail = await TransactionService.with_session(session).get(created.id, buyer)
        assert detail.transaction.status == "pending"

    run_with_db(scenario)


def test_pay_rechecks_stock_changed_since_creation(run_with_db):
    async def scenario(database):
        buyer, item = await _seed(database, balance=1000, price=10, stock=5)
        created = await _create(database, buyer, item, 4)
        async with database.transaction() as session:
            await SqlItemRepository(session).adjust_stock(item.id, -3)

        with pytest.raises(InsufficientStock):
            await _pay(database, created.id, buyer)
        assert await _balances(database, buyer.id, item.id) == (1000, 2)

    run_with_db(scenario)


def test_concurrent_payments_never_oversell(run_with_db):
    async def scenario(database):
        buyer, item = await _seed(database, balance=1000, price=10, stock=3)
        first = await _create(database, buyer, item, 2)
        second = await _create(database, buyer, item, 2)

        results = await asyncio.gather(
            _pay(database, first.id, buyer),
            _pay(database, second.id, buyer),
            return_exceptions=True,
        )
        succeeded = [result for result in results if not isinstance(result, Exception)]
        failed = [result for result in results if isinstance(result, Exception)]
        assert len(succeeded) == 1
        assert len(failed) == 1
        assert isinstance(failed[0], InsufficientStock)

        balance, stock = await _balances(database, buyer.id, item.id)
        assert stock == 1
        assert balance == 980

    run_with_db(scenario)


def test_cancel_then_pay_is_rejected(run_with_db):
    async def scenario(database):
        buyer, item = await _seed(database)
        created = await _create(database, buyer, item, 1)
        async with database.transaction() as session:
            cancelled = await TransactionService.with_session(session).cancel(created.id, buyer)
        assert cancelled.status == "cancelled"
        assert cancelled.cancelled_at is not None

        with pytest.raises(InvalidTransactionStateError):
            await _pay(database, created.id, buyer)
        assert await _balances(database, buyer.id, item.id) == (100, 5)

    run_with_db(scenario)


def test_delete_policy(run_with_db):
    async def scenario(database):
        buyer, item = await _seed(database)
        pending = await _create(database, buyer, item, 1)
        paid = await _create(database, buyer, item, 1)
        await _pay(database, paid.id, buyer)

        async with database.transaction() as session:
            service = TransactionService.with_session(session)
            deleted = await service.delete(pending.id, buyer)
            assert deleted.id == pending.id
            with pytest.raises(PaidTransactionDeletionError):
                await service.delete(paid.id, buyer)
            with pytest.raises(TransactionNotFoundError):
                await service.delete(pending.id, buyer)

        assert await _balances(database, buyer.id, item.id) == (70, 4)

    run_with_db(scenario)


def test_other_users_cannot_touch_a_transaction(run_with_db):
    async def scenario(database):
        buyer, item = await _seed(database)
        created = await _create(database, buyer, item, 1)
        async with database.transaction() as session:
            stranger = await create_user(session, "stranger@example.com", balance=500)
            admin = await create_user(session, "root@example.com", role=ROLE_ADMIN)

        with pytest.raises(TransactionPermissionError):
            await _pay(database, created.id, stranger)

        async with database.transaction() as session:
            service = TransactionService.with_session(session)
            assert await service.list_transactions(stranger) == []
            everything = await service.list_transactions(admin)
        assert [detail.transaction.id for detail in everything] == [created.id]
        assert everything[0].user.email == "buyer@example.com"
        assert everything[0].item.name == "Widget"

    run_with_db(scenario)
