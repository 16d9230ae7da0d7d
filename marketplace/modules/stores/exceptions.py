"""Store domain specific exceptions."""

from marketplace.core.errors import ConflictError, NotFoundError


class StoreNotFoundError(NotFoundError):
    default_message = "Store not found"


class StoreHasItemsError(ConflictError):
    default_message = "Store still has items and cannot be deleted"
