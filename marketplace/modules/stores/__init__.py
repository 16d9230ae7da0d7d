"""Store domain services and models."""

from .exceptions import StoreHasItemsError, StoreNotFoundError
from .models import Store, StoreCreateInput, StoreUpdateInput
from .service import StoreService

__all__ = [
    "Store",
    "StoreCreateInput",
    "StoreHasItemsError",
    "StoreNotFoundError",
    "StoreService",
    "StoreUpdateInput",
]
