"""Service providers bound to the request session."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.container import ApplicationContainer
from marketplace.modules.items import ItemService
from marketplace.modules.stores import StoreService
from marketplace.modules.transactions import TransactionService
from marketplace.modules.users import UserService

from .database import get_container, get_db_session


def get_user_service(
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_container),
) -> UserService:
    return UserService.with_session(db, password_rounds=container.settings.security.bcrypt_rounds)


def get_store_service(
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_container),
) -> StoreService:
    return StoreService.with_session(db, container.cache)


def get_item_service(
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_container),
) -> ItemService:
    return ItemService.with_session(db, image_store=container.image_store, cache=container.cache)


def get_transaction_service(db: AsyncSession = Depends(get_db_session)) -> TransactionService:
    return TransactionService.with_session(db)


__all__ = [
    "get_item_service",
    "get_store_service",
    "get_transaction_service",
    "get_user_service",
]
