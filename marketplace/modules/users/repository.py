"""Repository protocol for users."""

from __future__ import annotations

from typing import Protocol, Sequence

from .models import User


class UserRepository(Protocol):
    """Abstract repository interface for user persistence."""

    async def get_by_id(self, user_id: str, *, for_update: bool = False) -> User | None:
        ...

    async def get_by_email(self, email: str) -> User | None:
        ...

    async def list_users(self) -> Sequence[User]:
        ...

    async def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: str,
        store_id: str | None,
    ) -> User:
        ...

    async def update_user(
        self,
        user_id: str,
        *,
        name: str,
        email: str,
        role: str,
        store_id: str | None,
        password_hash: str | None = None,
    ) -> User | None:
        ...

    async def delete_user(self, user_id: str) -> User | None:
        ...

    async def adjust_balance(self, user_id: str, delta: int) -> User | None:
        """Add ``delta`` unless the balance would drop below zero; ``None`` if no row changed."""
        ...

    async def has_transactions(self, user_id: str) -> bool:
        ...
