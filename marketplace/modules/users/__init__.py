"""User domain services and models."""

from .exceptions import (
    EmailAlreadyUsedError,
    InvalidCredentialsError,
    ManagedStoreNotFoundError,
    UserHasTransactionsError,
    UserNotFoundError,
    UserPermissionError,
)
from .models import ROLE_ADMIN, ROLE_USER, ROLES, User, UserCreateInput, UserUpdateInput
from .service import UserService

__all__ = [
    "EmailAlreadyUsedError",
    "InvalidCredentialsError",
    "ManagedStoreNotFoundError",
    "ROLES",
    "ROLE_ADMIN",
    "ROLE_USER",
    "User",
    "UserCreateInput",
    "UserHasTransactionsError",
    "UserNotFoundError",
    "UserPermissionError",
    "UserService",
    "UserUpdateInput",
]
