"""User domain specific exceptions."""

from marketplace.core.errors import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ReferenceViolation,
    UniqueConstraintViolation,
)


class UserNotFoundError(NotFoundError):
    default_message = "User not found"


class EmailAlreadyUsedError(UniqueConstraintViolation):
    default_message = "Email already used"


class InvalidCredentialsError(AuthenticationError):
    default_message = "Invalid email or password"


class UserPermissionError(ForbiddenError):
    default_message = "You do not have permission to modify this user"


class ManagedStoreNotFoundError(ReferenceViolation):
    default_message = "Store not found with provided ID"


class UserHasTransactionsError(ConflictError):
    default_message = "User has transactions and cannot be deleted"
