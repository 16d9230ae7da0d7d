"""Reusable FastAPI dependencies."""

from .auth import get_current_admin, get_current_user, get_optional_user
from .database import get_container, get_db_session
from .services import get_item_service, get_store_service, get_transaction_service, get_user_service

__all__ = [
    "get_container",
    "get_current_admin",
    "get_current_user",
    "get_db_session",
    "get_item_service",
    "get_optional_user",
    "get_store_service",
    "get_transaction_service",
    "get_user_service",
]
