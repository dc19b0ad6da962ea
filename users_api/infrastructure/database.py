"""Database Session Manager — bounded async connection pool with drain on shutdown.

Invariants:
    - At most pool_size connections exist at once (max_overflow=0); extra
      acquisitions queue for up to pool_timeout seconds
    - Every session auto-rolls-back on exception and returns its connection on exit
    - A connection left checked in longer than idle_timeout is closed: eagerly
      by the idle reaper, or at the latest when it is next checked out
    - All store exceptions mapped to UniqueViolationError or DatabaseError (core/errors.py)
    - After close() starts, session() refuses new acquisitions; close() returns
      only once in-flight sessions have finished and the engine is disposed

Design Decisions:
    - One manager per process, created in the FastAPI lifespan and stored on
      app.state; handlers receive it through get_db_manager
    - Idle time is tracked with pool checkin/checkout events on the sync pool
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.exc import DisconnectionError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import ConnectionPoolEntry
from sqlalchemy.util import greenlet_spawn

from users_api.core.errors import DatabaseError, UniqueViolationError

logger = logging.getLogger(__name__)

PG_UNIQUE_VIOLATION = "23505"
IDLE_SINCE = "idle_since"


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the driver reports a unique-constraint violation."""
    orig = exc.orig
    if getattr(orig, "sqlstate", None) == PG_UNIQUE_VIOLATION:
        return True
    if getattr(orig, "pgcode", None) == PG_UNIQUE_VIOLATION:
        return True
    # SQLite has no SQLSTATE
    if getattr(orig, "sqlite_errorname", None) == "SQLITE_CONSTRAINT_UNIQUE":
        return True
    return str(orig).startswith("UNIQUE constraint failed")


def _store_message(exc: BaseException) -> str:
    """Driver-level message without SQLAlchemy's statement/background suffix."""
    orig = getattr(exc, "orig", None) or exc
    # async adapters chain the native driver error as __cause__
    native = orig.__cause__ if orig is not exc and orig.__cause__ else orig
    return str(native) or type(native).__name__


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and drain."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        idle_timeout: float = 30.0,
        connect_timeout: float = 2.0,
        pool_timeout: float = 30.0,
    ):
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=0,
            pool_timeout=pool_timeout,
            pool_pre_ping=True,
            connect_args={"timeout": connect_timeout},
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self.idle_timeout = idle_timeout
        self._idle: dict[ConnectionPoolEntry, float] = {}
        self._reaper: asyncio.Task | None = None
        self._closing = False
        self._in_flight = 0
        self._drained = asyncio.Event()
        self._drained.set()
        self._track_idle_connections()

    @property
    def closing(self) -> bool:
        return self._closing

    @property
    def in_flight(self) -> int:
        return self._in_flight

    def _track_idle_connections(self) -> None:
        pool = self.engine.sync_engine.pool

        @event.listens_for(pool, "checkin")
        def stamp_idle(dbapi_connection, connection_record):
            now = time.monotonic()
            connection_record.info[IDLE_SINCE] = now
            self._idle[connection_record] = now

        @event.listens_for(pool, "checkout")
        def evict_if_idle_too_long(
            dbapi_connection, connection_record, connection_proxy,
        ):
            self._idle.pop(connection_record, None)
            idle_since = connection_record.info.pop(IDLE_SINCE, None)
            if idle_since is None:
                return
            if time.monotonic() - idle_since > self.idle_timeout:
                # the pool invalidates this connection and opens a fresh one
                raise DisconnectionError(
                    f"Connection idle for more than {self.idle_timeout}s",
                )

    def start_idle_reaper(self) -> None:
        """Close idle connections in the background until close()."""
        if self._reaper is None:
            self._reaper = asyncio.create_task(self._reap_idle_forever())

    async def _reap_idle_forever(self) -> None:
        while True:
            await asyncio.sleep(self.idle_timeout / 2)
            await self.reap_idle()

    async def reap_idle(self) -> int:
        """Close every checked-in connection idle beyond idle_timeout."""
        now = time.monotonic()
        expired = [
            record for record, since in list(self._idle.items())
            if now - since > self.idle_timeout
        ]
        for record in expired:
            if self._idle.pop(record, None) is None:
                continue
            record.info.pop(IDLE_SINCE, None)
            await greenlet_spawn(record.invalidate)
        if expired:
            logger.debug(f"Closed {len(expired)} idle database connection(s)")
        return len(expired)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback and typed error mapping."""
        if self._closing:
            raise DatabaseError("Connection pool is closing", "acquire")
        self._in_flight += 1
        self._drained.clear()
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            if is_unique_violation(e):
                logger.warning(f"DB unique violation: {_store_message(e)}")
                raise UniqueViolationError(_store_message(e)) from e
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError(_store_message(e), "commit") from e
        except (SQLAlchemyError, OSError) as e:
            await session.rollback()
            logger.error(f"Database error: {e}")
            raise DatabaseError(_store_message(e), "execute") from e
        finally:
            await session.close()
            self._in_flight -= 1
            if self._in_flight == 0:
                self._drained.set()

    async def ping(self) -> None:
        """Run SELECT 1; raises DatabaseError if the store does not answer."""
        async with self.session() as db:
            await db.execute(text("SELECT 1"))

    async def check_connection(self) -> bool:
        """Startup reachability check. Logs the outcome, never raises."""
        try:
            await self.ping()
        except DatabaseError as e:
            logger.warning(
                f"Error connecting to database: {e.detail}",
                extra={"error_code": e.code},
            )
            return False
        logger.info("Successfully connected to database")
        return True

    async def close(self) -> None:
        """Refuse new sessions, wait for in-flight ones, dispose the pool."""
        self._closing = True
        if self._reaper is not None:
            self._reaper.cancel()
            try:
                await self._reaper
            except asyncio.CancelledError:
                pass
            self._reaper = None
        if self._in_flight:
            logger.info(
                f"Waiting for {self._in_flight} in-flight database session(s)",
            )
        await self._drained.wait()
        await self.engine.dispose()
        self._idle.clear()
        logger.info("Database pool closed")


def create_db_manager(settings) -> DatabaseSessionManager:
    """Build the pool manager from application settings."""
    return DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.db_pool_max,
        idle_timeout=settings.db_idle_timeout,
        connect_timeout=settings.db_connect_timeout,
        pool_timeout=settings.db_pool_timeout,
    )


def get_db_manager(request: Request) -> DatabaseSessionManager:
    """FastAPI dependency for the process-wide pool manager."""
    manager = getattr(request.app.state, "db_manager", None)
    if manager is None:
        raise DatabaseError("Database not initialized", "acquire")
    return manager
