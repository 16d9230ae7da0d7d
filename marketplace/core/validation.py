"""Input normalisation shared by the HTTP layer and the services.

Numeric request fields are bounded with the limits below when they are parsed.
Services re-check every number with :func:`ensure_int`, which rejects
anything that is not a real integer in range.
"""

from __future__ import annotations

import html
import re
import uuid
from typing import Annotated, Any

from pydantic import Field

from marketplace.core.errors import ValidationError

MAX_PRICE = 1_000_000_000
MAX_STOCK = 1_000_000
MAX_QUANTITY = 10_000
MAX_TOPUP_AMOUNT = 1_000_000_000
MAX_PAGE_SIZE = 100

Quantity = Annotated[int, Field(gt=0, le=MAX_QUANTITY, strict=True)]

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PASSWORD_RE = re.compile(r"^(?=.*[0-9])(?=.*[!@#$%^&*])[a-zA-Z0-9!@#$%^&*]{8,}$")

PASSWORD_RULES = (
    "Password must be at least 8 characters with at least 1 number and 1 special character (!@#$%^&*)"
)


def ensure_int(name: str, value: Any, *, minimum: int | None = None, maximum: int | None = None) -> int:
    """Accept a real integer within bounds, reject everything else."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer")
    if minimum is not None and value < minimum:
        raise ValidationError(f"{name} must be at least {minimum}")
    if maximum is not None and value > maximum:
        raise ValidationError(f"{name} must be at most {maximum}")
    return value


def sanitize_text(value: str, *, field: str, min_length: int = 1, max_length: int = 255) -> str:
    cleaned = html.escape(value.strip(), quote=True)
    if len(cleaned) < min_length:
        raise ValidationError(f"{field} must not be empty" if min_length == 1 else f"{field} is too short")
    if len(cleaned) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return cleaned


def normalize_email(email: str) -> str:
    normalized = email.strip().lower()
    if not _EMAIL_RE.match(normalized):
        raise ValidationError("Invalid email format")
    return normalized


def validate_password(password: str) -> str:
    if not _PASSWORD_RE.match(password):
        raise ValidationError(PASSWORD_RULES)
    return password


def ensure_uuid(value: str, *, entity: str) -> str:
    try:
        return str(uuid.UUID(value))
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid {entity} ID format") from exc


__all__ = [
    "MAX_PAGE_SIZE",
    "MAX_PRICE",
    "MAX_QUANTITY",
    "MAX_STOCK",
    "MAX_TOPUP_AMOUNT",
    "PASSWORD_RULES",
    "Quantity",
    "ensure_int",
    "ensure_uuid",
    "normalize_email",
    "sanitize_text",
    "validate_password",
]
