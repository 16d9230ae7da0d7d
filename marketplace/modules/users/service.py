"""Domain services for user management."""

from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.crypto import DEFAULT_ROUNDS, hash_password, verify_password
from marketplace.core.errors import ValidationError
from marketplace.core.validation import (
    MAX_TOPUP_AMOUNT,
    ensure_int,
    normalize_email,
    sanitize_text,
    validate_password,
)
from marketplace.modules.common import UNSET

from .exceptions import (
    EmailAlreadyUsedError,
    InvalidCredentialsError,
    UserHasTransactionsError,
    UserNotFoundError,
    UserPermissionError,
)
from .models import ROLES, User, UserCreateInput, UserUpdateInput
from .repository import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Encapsulates core user use cases."""

    def __init__(self, repository: UserRepository, *, password_rounds: int = DEFAULT_ROUNDS) -> None:
        self._repository = repository
        self._password_rounds = password_rounds

    @classmethod
    def with_session(cls, session: AsyncSession, *, password_rounds: int = DEFAULT_ROUNDS) -> "UserService":
        # deferred import, the repository module imports this package
        from marketplace.infrastructure.database.repositories.user_repository import SqlUserRepository

        return cls(SqlUserRepository(session), password_rounds=password_rounds)

    async def get_user(self, user_id: str) -> User:
        user = await self._repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    async def get_by_email(self, email: str) -> User:
        user = await self._repository.get_by_email(email.strip().lower())
        if user is None:
            raise UserNotFoundError()
        return user

    async def find_by_email(self, email: str) -> User | None:
        return await self._repository.get_by_email(email.strip().lower())

    async def list_users(self) -> Sequence[User]:
        return await self._repository.list_users()

    async def authenticate(self, email: str, password: str) -> User:
        try:
            normalized = normalize_email(email)
        except ValidationError as exc:
            raise InvalidCredentialsError() from exc
        user = await self._repository.get_by_email(normalized)
        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        return user

    async def register(self, payload: UserCreateInput) -> User:
        name = sanitize_text(payload.name, field="Name", min_length=2, max_length=100)
        email = normalize_email(payload.email)
        validate_password(payload.password)
        _ensure_role(payload.role)

        if await self._repository.get_by_email(email) is not None:
            raise EmailAlreadyUsedError()

        user = await self._repository.create_user(
            name=name,
            email=email,
            password_hash=hash_password(payload.password, self._password_rounds),
            role=payload.role,
            store_id=payload.store_id,
        )
        logger.info("Registered user %s", user.id)
        return user

    async def update_user(self, user_id: str, payload: UserUpdateInput, actor: User) -> User:
        _ensure_self_or_admin(actor, user_id)
        if payload.touches_privileges() and not actor.is_admin():
            raise UserPermissionError("Only administrators can change roles or managed stores")

        current = await self.get_user(user_id)

        name = current.name
        if payload.name is not UNSET and payload.name is not None:
            name = sanitize_text(payload.name, field="Name", min_length=2, max_length=100)

        email = current.email
        if payload.email is not UNSET and payload.email is not None:
            email = normalize_email(payload.email)
            if email != current.email and await self._repository.get_by_email(email) is not None:
                raise EmailAlreadyUsedError()

        password_hash = None
        if payload.password is not UNSET and payload.password is not None:
            validate_password(payload.password)
            password_hash = hash_password(payload.password, self._password_rounds)

        role = current.role
        if payload.role is not UNSET and payload.role is not None:
            role = _ensure_role(payload.role)

        store_id = payload.store_id if payload.store_id is not UNSET else current.store_id

        updated = await self._repository.update_user(
            user_id,
            name=name,
            email=email,
            role=role,
            store_id=store_id,
            password_hash=password_hash,
        )
        if updated is None:
            raise UserNotFoundError()
        return updated

    async def delete_user(self, user_id: str, actor: User) -> User:
        _ensure_self_or_admin(actor, user_id)
        await self.get_user(user_id)
        if await self._repository.has_transactions(user_id):
            raise UserHasTransactionsError()
        deleted = await self._repository.delete_user(user_id)
        if deleted is None:
            raise UserNotFoundError()
        logger.info("Deleted user %s", user_id)
        return deleted

    async def top_up(self, user_id: str, amount: int, actor: User) -> User:
        _ensure_self_or_admin(actor, user_id)
        amount = ensure_int("Amount", amount, minimum=1, maximum=MAX_TOPUP_AMOUNT)
        user = await self._repository.adjust_balance(user_id, amount)
        if user is None:
            raise UserNotFoundError()
        logger.info("User %s topped up by %s, new balance %s", user_id, amount, user.balance)
        return user


def _ensure_self_or_admin(actor: User, user_id: str) -> None:
    if actor.id != user_id and not actor.is_admin():
        raise UserPermissionError()


def _ensure_role(role: str) -> str:
    if role not in ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(sorted(ROLES))}")
    return role
