"""Item domain specific exceptions."""

from marketplace.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ReferenceViolation,
    UniqueConstraintViolation,
)


class ItemNotFoundError(NotFoundError):
    default_message = "Item not found"


class ItemNameTakenError(UniqueConstraintViolation):
    default_message = "Item with this name already exists in this store"


class StoreReferenceError(ReferenceViolation):
    default_message = "Store not found with provided ID"


class ItemPermissionError(ForbiddenError):
    default_message = "You do not have permission to modify items of this store"


class ItemHasTransactionsError(ConflictError):
    default_message = "Item has transactions and cannot be deleted"
