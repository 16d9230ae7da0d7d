"""Row locking and retry helpers for settlement-style units of work."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from sqlalchemy import Select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def lock_for_update(stmt: Select) -> Select:
    """
    Apply row-level locking and reload the rows from the database.

    NOTE: SQLite ignores SELECT ... FOR UPDATE; callers still guard every
    write with a conditional UPDATE.
    """
    return stmt.with_for_update().execution_options(populate_existing=True)


async def run_with_retry(
    session: AsyncSession,
    operation: Callable[[], Awaitable[T]],
    *,
    attempts: int = 3,
    backoff_base: float = 0.05,
) -> T:
    """
    Run ``operation`` and retry it on lock contention.

    Retries on OperationalError (deadlocks, busy database) and StaleDataError.
    The session is rolled back before every retry so each attempt starts from
    a clean transaction.
    """
    for attempt in range(attempts):
        try:
            return await operation()
        except (OperationalError, StaleDataError) as exc:
            await session.rollback()
            if attempt >= attempts - 1:
                raise
            delay = backoff_base * (2 ** attempt)
            logger.warning("Retrying after concurrency failure (attempt %s/%s): %s", attempt + 1, attempts, exc)
            await asyncio.sleep(delay)
    raise RuntimeError("run_with_retry called with attempts < 1")
