"""Database dependency injection for FastAPI.

Provides async session factories for read and write operations. Engines are
created lazily on first use and shared by every request in the process.
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_read_engine, create_write_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings

_probe = DefaultConnectionProbe()

_write_engine: AsyncEngine | None = None
_read_engine: AsyncEngine | None = None

_write_sessionmaker: async_sessionmaker[AsyncSession] | None = None
_read_sessionmaker: async_sessionmaker[AsyncSession] | None = None

_engine_lock = threading.Lock()


def get_write_engine() -> AsyncEngine:
    """Get the write database engine (singleton).

    Uses double-check locking so concurrent first requests create one engine.
    Also creates and caches the matching sessionmaker.

    Returns:
        Configured async engine for write operations
    """
    global _write_engine, _write_sessionmaker
    if _write_engine is None:
        with _engine_lock:
            if _write_engine is None:
                settings = get_database_settings()
                _write_engine = create_write_engine(settings)
                _write_sessionmaker = async_sessionmaker(
                    _write_engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
                _probe.pool_initialized(
                    min_conn=settings.pool_min_connections,
                    max_conn=settings.pool_max_connections,
                )
    return _write_engine


def get_read_engine() -> AsyncEngine:
    """Get the read database engine (singleton).

    Returns:
        Configured async engine for read operations
    """
    global _read_engine, _read_sessionmaker
    if _read_engine is None:
        with _engine_lock:
            if _read_engine is None:
                settings = get_database_settings()
                _read_engine = create_read_engine(settings)
                _read_sessionmaker = async_sessionmaker(
                    _read_engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
    return _read_engine


async def get_write_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a write session for mutations (FastAPI dependency).

    The session does NOT auto-commit. Services own their transactions, either
    with ``async with session.begin()`` or through ``run_in_transaction``.

    Yields:
        AsyncSession for database operations
    """
    get_write_engine()
    assert _write_sessionmaker is not None

    async with _write_sessionmaker() as session:
        yield session


async def get_read_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a read-only session for queries (FastAPI dependency).

    Transactions on this session are READ ONLY at the database level.

    Yields:
        AsyncSession for read-only database operations
    """
    get_read_engine()
    assert _read_sessionmaker is not None

    async with _read_sessionmaker() as session:
        yield session


async def verify_database_connection() -> bool:
    """Run a trivial query on the write engine.

    Returns:
        True when the database answered, False otherwise
    """
    settings = get_database_settings()
    try:
        async with get_write_engine().connect() as connection:
            await connection.execute(text("SELECT 1"))
    except Exception as e:
        _probe.connection_failed(
            host=settings.host, database=settings.database, error=e
        )
        return False
    return True


async def close_database_connections() -> None:
    """Close all database engine connections.

    Should be called on application shutdown. Also resets sessionmakers so
    the engines can be re-created (tests rely on this).
    """
    global _write_engine, _read_engine, _write_sessionmaker, _read_sessionmaker

    if _write_engine is not None:
        await _write_engine.dispose()
        _probe.pool_closed()
        _write_engine = None
        _write_sessionmaker = None

    if _read_engine is not None:
        await _read_engine.dispose()
        _probe.pool_closed()
        _read_engine = None
        _read_sessionmaker = None
