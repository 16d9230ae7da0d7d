"""Error taxonomy shared by repositories, services and the HTTP layer.

Every error carries a stable, client-safe ``message`` and the HTTP status it
maps to. Entity modules subclass these kinds (``UserNotFoundError`` and so
on) so callers can catch either the precise error or the whole kind.
"""

from __future__ import annotations

from typing import Any


class MarketplaceError(Exception):
    """Base class for all expected application errors."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, *, detail: Any = None) -> None:
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(MarketplaceError):
    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(MarketplaceError):
    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(MarketplaceError):
    status_code = 403
    default_message = "You do not have permission to perform this action"


class NotFoundError(MarketplaceError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(MarketplaceError):
    status_code = 409
    default_message = "Request conflicts with the current state of the resource"


class UniqueConstraintViolation(ConflictError):
    default_message = "Resource already exists"


class InvalidStateError(ConflictError):
    default_message = "Operation is not allowed in the current state"


class ReferenceViolation(MarketplaceError):
    status_code = 400
    default_message = "Referenced resource does not exist"


class BusinessRuleError(MarketplaceError):
    status_code = 400
    default_message = "Request rejected by business rules"


class InsufficientStock(BusinessRuleError):
    default_message = "Insufficient stock"


class InsufficientBalance(BusinessRuleError):
    default_message = "Insufficient balance"


class UpstreamFailure(MarketplaceError):
    status_code = 422
    default_message = "Upstream dependency failed"


class UnavailableError(MarketplaceError):
    status_code = 503
    default_message = "Service temporarily unavailable"


class InternalError(MarketplaceError):
    status_code = 500


__all__ = [
    "MarketplaceError",
    "ValidationError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "UniqueConstraintViolation",
    "InvalidStateError",
    "ReferenceViolation",
    "BusinessRuleError",
    "InsufficientStock",
    "InsufficientBalance",
    "UpstreamFailure",
    "UnavailableError",
    "InternalError",
]
