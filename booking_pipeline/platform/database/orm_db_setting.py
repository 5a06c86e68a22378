"""
SQLAlchemy async engine and session management

This module provides:
1. AsyncEngineManager: event-loop-aware engine/session maker
2. Base: declarative base shared by every service's models
3. Database: session provider injected through the DI container; connection-level
   failures surface as TransientStoreFailure so callers can retry them

Test suites and standalone consumers may drive sessions from more than one event loop,
so engines are rebuilt whenever the running loop changes.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from asyncpg.exceptions import PostgresConnectionError
from sqlalchemy.exc import (
    DBAPIError,
    InterfaceError,
    OperationalError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from booking_pipeline.platform.config.core_setting import settings
from booking_pipeline.platform.exception.exceptions import TransientStoreFailure
from booking_pipeline.platform.logging.loguru_io import Logger


class AsyncEngineManager:
    """
    Keeps one engine per running event loop to prevent
    "Task got Future attached to a different loop" errors.
    """

    def __init__(self) -> None:
        self._engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    def get_engine(self) -> AsyncEngine:
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop running, create engine without loop tracking
            if self._engine is None:
                self._engine = self._create_engine()
            return self._engine

        if self._loop is not current_loop:
            if self._engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, disposing old engine...')
                self._session_maker = None

            Logger.base.info(f'🔗 [DB] Creating engine for event loop {id(current_loop)}')
            self._engine = self._create_engine()
            self._loop = current_loop

        return self._engine  # type: ignore[return-value]

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        engine = self.get_engine()
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    def _create_engine(self) -> AsyncEngine:
        return create_async_engine(
            settings.DATABASE_URL_ASYNC,
            echo=False,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=settings.DB_POOL_PRE_PING,
        )


# Global engine manager
_engine_manager = AsyncEngineManager()


def get_engine() -> AsyncEngine:
    return _engine_manager.get_engine()


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    return _engine_manager.get_session_maker()


class Base(DeclarativeBase):
    pass


CONNECTION_ERRORS: tuple[type[Exception], ...] = (
    OperationalError,
    InterfaceError,
    PoolTimeoutError,
    PostgresConnectionError,
    OSError,
)


def is_connection_error(exc: Exception) -> bool:
    """Store unreachable or connection lost, as opposed to a failing statement."""
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    return isinstance(exc, CONNECTION_ERRORS)


async def create_db_and_tables() -> None:
    """Create database tables if they don't exist"""
    try:
        async with get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    except Exception as e:
        error_msg = str(e).lower()
        if any(
            keyword in error_msg
            for keyword in ['already exists', 'duplicate key', 'unique constraint']
        ):
            Logger.base.info('Tables already exist, skipping creation')
        else:
            Logger.base.error(f'Error creating tables: {e}')
            raise


async def dispose_engine() -> None:
    await get_engine().dispose()


class Database:
    """Session provider for repositories (wired through the DI container)."""

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for database sessions

        Rolls back automatically on exception; callers commit explicitly.
        Raises TransientStoreFailure when the database cannot be reached.
        """
        session_maker = get_session_maker()
        try:
            async with session_maker() as session:
                yield session
        except Exception as e:
            if not is_connection_error(e):
                raise
            Logger.base.warning(f'🔌 [DB] Connection failure: {e}')
            raise TransientStoreFailure(f'Database unavailable: {e}') from e
