"""Exception handlers translating failures into the response envelope."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from starlette.exceptions import HTTPException as StarletteHTTPException

from marketplace.core.errors import MarketplaceError, UnavailableError

from .envelope import error_response

logger = logging.getLogger(__name__)


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
        errors.append({"field": ".".join(location), "message": error.get("msg", "Invalid value")})
    return errors


def register_exception_handlers(app: FastAPI, *, expose_detail: bool = False) -> None:
    @app.exception_handler(MarketplaceError)
    async def handle_marketplace_error(request: Request, exc: MarketplaceError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        else:
            logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.status_code, exc.message)
        payload = exc.detail if expose_detail else None
        return error_response(exc.status_code, exc.message, payload)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        errors = _field_errors(exc)
        message = "Validation failed"
        if errors:
            first = errors[0]
            message = f"{first['field']}: {first['message']}" if first["field"] else first["message"]
        return error_response(400, message, {"errors": errors})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(PoolTimeoutError)
    @app.exception_handler(OperationalError)
    async def handle_database_unavailable(request: Request, exc: Exception):
        logger.error("Database unavailable during %s %s: %s", request.method, request.url.path, exc)
        payload = {"error": str(exc)} if expose_detail else None
        return error_response(UnavailableError.status_code, UnavailableError.default_message, payload)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error during %s %s", request.method, request.url.path)
        payload = {"error": str(exc)} if expose_detail else None
        return error_response(500, "Internal server error", payload)


__all__ = ["register_exception_handlers"]
