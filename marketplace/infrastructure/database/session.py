"""Async SQLAlchemy engine and session management."""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, Callable

from sqlalchemy import event, text
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from marketplace.core.config import DatabaseSettings
from marketplace.infrastructure.database.base import Base

logger = logging.getLogger(__name__)


def _build_engine(settings: DatabaseSettings) -> AsyncEngine:
    engine_kwargs: dict[str, Any] = {
        "echo": settings.echo,
        "pool_pre_ping": True,
    }
    if settings.is_sqlite:
        # sqlite3 busy timeout, in seconds
        engine_kwargs["connect_args"] = {"timeout": settings.command_timeout}
    else:
        if settings.pool_size is not None:
            engine_kwargs["pool_size"] = settings.pool_size
        if settings.max_overflow is not None:
            engine_kwargs["max_overflow"] = settings.max_overflow
        engine_kwargs["pool_timeout"] = settings.pool_timeout
        engine_kwargs["pool_recycle"] = settings.pool_recycle
        if settings.url.startswith("postgresql+asyncpg"):
            engine_kwargs["connect_args"] = {
                "timeout": settings.pool_timeout,
                "command_timeout": settings.command_timeout,
            }

    return create_async_engine(settings.url, **engine_kwargs)


def _install_query_timing(engine: Engine, slow_query_ms: int) -> None:
    @event.listens_for(engine, "before_cursor_execute")
    def _start_timer(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("query_start_time", []).append(time.perf_counter())

    @event.listens_for(engine, "after_cursor_execute")
    def _log_slow_query(conn, cursor, statement, parameters, context, executemany):
        started = conn.info["query_start_time"].pop()
        elapsed_ms = (time.perf_counter() - started) * 1000
        if elapsed_ms > slow_query_ms:
            logger.warning("Slow query (%.1f ms, %s rows): %s", elapsed_ms, cursor.rowcount, statement)

    @event.listens_for(engine, "handle_error")
    def _log_failed_query(exception_context):
        starts = exception_context.connection.info.get("query_start_time") if exception_context.connection else None
        if starts:
            starts.pop()
        logger.error(
            "Error executing query: %s; statement: %s",
            exception_context.original_exception,
            exception_context.statement,
        )


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class Database:
    """Owns the connection pool and hands out sessions.

    Constructed once per application and disposed at shutdown.
    """

    def __init__(self, settings: DatabaseSettings) -> None:
        self.settings = settings
        self.engine = _build_engine(settings)
        _install_query_timing(self.engine.sync_engine, settings.slow_query_ms)
        if settings.is_sqlite:
            _enable_sqlite_foreign_keys(self.engine.sync_engine)
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Session scope that commits on success and rolls back on any error."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        # models register themselves on Base.metadata on import
        from marketplace.infrastructure.database import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database connection pool disposed")


def after_commit(session: AsyncSession, callback: Callable[[], None]) -> None:
    """Run ``callback`` once the session's current transaction commits."""
    event.listen(session.sync_session, "after_commit", lambda _session: callback(), once=True)


__all__ = ["Database", "after_commit"]
