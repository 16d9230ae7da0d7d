"""Domain models for users."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from marketplace.modules.common import UNSET

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = frozenset({ROLE_USER, ROLE_ADMIN})


@dataclass(slots=True)
class User:
    id: str
    name: str
    email: str
    role: str
    balance: int
    password_hash: str = field(repr=False)
    store_id: Optional[str] = None
    created_at: Optional[datetime] = None

    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def manages_store(self, store_id: str | None) -> bool:
        if self.is_admin():
            return True
        return self.store_id is not None and self.store_id == store_id


@dataclass(slots=True)
class UserCreateInput:
    name: str
    email: str
    password: str
    role: str = ROLE_USER
    store_id: Optional[str] = None


@dataclass(slots=True)
class UserUpdateInput:
    name: Optional[str] | object = UNSET
    email: Optional[str] | object = UNSET
    password: Optional[str] | object = UNSET
    role: Optional[str] | object = UNSET
    store_id: Optional[str] | object = UNSET

    def touches_privileges(self) -> bool:
        return self.role is not UNSET or self.store_id is not UNSET
