"""SQLAlchemy-backed repository implementations."""

from .item_repository import SqlItemRepository
from .store_repository import SqlStoreRepository
from .transaction_repository import SqlTransactionRepository
from .user_repository import SqlUserRepository

__all__ = [
    "SqlItemRepository",
    "SqlStoreRepository",
    "SqlTransactionRepository",
    "SqlUserRepository",
]
