"""Liveness and health endpoints."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError

from marketplace import __version__
from marketplace.core.container import ApplicationContainer
from marketplace.core.errors import UnavailableError
from marketplace.interfaces.http.deps import get_container
from marketplace.interfaces.http.envelope import ok
from marketplace.schemas import Envelope, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=PlainTextResponse, summary="Liveness probe")
async def root(container: ApplicationContainer = Depends(get_container)) -> str:
    return f"{container.settings.project_name} is running"


@router.get("/health", response_model=Envelope[HealthResponse], summary="Database health check")
async def health(container: ApplicationContainer = Depends(get_container)):
    try:
        await container.database.ping()
    except SQLAlchemyError as exc:
        logger.error("Health check failed: %s", exc)
        raise UnavailableError("Database unavailable") from exc
    return ok(
        HealthResponse(
            status="ok",
            database="ok",
            version=__version__,
            details={"environment": container.settings.environment},
        ),
        "Service healthy",
    )
