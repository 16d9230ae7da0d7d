"""Item domain services and models."""

from .exceptions import (
    ItemHasTransactionsError,
    ItemNameTakenError,
    ItemNotFoundError,
    ItemPermissionError,
    StoreReferenceError,
)
from .models import SORTABLE_FIELDS, Item, ItemCreateInput, ItemListQuery, ItemUpdateInput
from .service import ItemService

__all__ = [
    "Item",
    "ItemCreateInput",
    "ItemHasTransactionsError",
    "ItemListQuery",
    "ItemNameTakenError",
    "ItemNotFoundError",
    "ItemPermissionError",
    "ItemService",
    "ItemUpdateInput",
    "SORTABLE_FIELDS",
    "StoreReferenceError",
]
