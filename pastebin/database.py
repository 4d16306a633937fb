"""Catalog database engine and session handling.

The catalog lives in SQLite by default (PostgreSQL also works). Each
catalog or credential operation opens a short-lived session through
:func:`session_scope`, which commits on success and rolls back on error.

Examples:
    >>> from pastebin.database import get_session_factory, init_db, session_scope
    >>> await init_db()  # Create tables
    >>> async with session_scope(get_session_factory()) as session:
    ...     result = await session.execute(select(Item))
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from pastebin.config import get_settings

logger = logging.getLogger(__name__)

# Global engine and session factory (initialized lazily)
_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def create_engine_for(database_url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for a catalog URL.

    Note:
        For SQLite, enables WAL mode and a busy timeout so concurrent
        writers queue behind each other instead of failing.
        For PostgreSQL, configures connection pooling.
    """
    if database_url.startswith("sqlite"):
        engine = create_async_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )

        @event.listens_for(engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA busy_timeout=5000")
            cursor.close()

        return engine

    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
    )


def get_engine() -> AsyncEngine:
    """Get or create the configured async database engine.

    Returns:
        AsyncEngine: SQLAlchemy async engine.
    """
    global _engine

    if _engine is None:
        settings = get_settings()
        _engine = create_engine_for(settings.DATABASE_URL, echo=settings.DEBUG)
        logger.info(f"Database engine created: {settings.DATABASE_URL.split('@')[-1]}")

    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create async session factory.

    Returns:
        async_sessionmaker: Session factory for creating sessions.
    """
    global _async_session_factory

    if _async_session_factory is None:
        _async_session_factory = create_session_factory(get_engine())

    return _async_session_factory


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Build a session factory bound to an engine.

    Args:
        engine: The async engine sessions should use.

    Returns:
        async_sessionmaker with the application's session options.
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Open a session from ``factory`` that commits on success.

    Yields:
        AsyncSession: Database session.

    Note:
        Session is automatically committed on success, rolled back on error.
    """
    session = factory()

    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def init_db(engine: AsyncEngine | None = None) -> None:
    """Create the items and credentials tables if missing.

    Should be called once at application startup.

    Args:
        engine: Engine to initialize (defaults to the global engine).
    """
    from pastebin.models import Base

    engine = engine or get_engine()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database tables created")


async def check_db_connection() -> bool:
    """Check if database is accessible.

    Returns:
        bool: True if database is healthy.
    """
    try:
        engine = get_engine()
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


async def close_db() -> None:
    """Close database connections.

    Should be called at application shutdown.
    """
    global _engine, _async_session_factory

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
        logger.info("Database connections closed")
