"""Helpers producing the ``{success, message, payload}`` envelope."""

from typing import Any, Mapping, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from marketplace.schemas import Envelope


def ok(payload: Any = None, message: str = "OK") -> Envelope:
    return Envelope(success=True, message=message, payload=payload)


def error_response(
    status_code: int,
    message: str,
    payload: Any = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    body = {"success": False, "message": message, "payload": jsonable_encoder(payload)}
    return JSONResponse(status_code=status_code, content=body, headers=dict(headers) if headers else None)


__all__ = ["error_response", "ok"]
