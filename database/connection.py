"""
Database Connection Management

Lazily builds one async engine and session factory per process. Sessions
are handed to FastAPI routes through get_db and to engine-side code (the
prediction recorder) through get_db_context; both commit on success.
"""

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import text

from .config import get_database_settings

logger = logging.getLogger(__name__)


# =============================================================================
# BASE MODEL
# =============================================================================

class Base(DeclarativeBase):
    """Declarative base for sessions, sequences, prediction logs and series."""
    pass


# =============================================================================
# ENGINE & SESSION FACTORY
# =============================================================================

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _engine_options(settings) -> dict:
    if settings.is_sqlite:
        return {"echo": settings.echo_sql}

    return {
        "echo": settings.echo_sql,
        "pool_size": settings.pool_size,
        "max_overflow": settings.max_overflow,
        "pool_timeout": settings.pool_timeout,
        "pool_recycle": settings.pool_recycle,
        "connect_args": {
            "ssl": settings.use_ssl,
            # pgbouncer in transaction mode cannot share prepared statements
            "prepared_statement_cache_size": 0,
        },
    }


def get_engine() -> AsyncEngine:
    """
    The process-wide async engine, created on first use.
    PostgreSQL gets a sized connection pool; SQLite keeps SQLAlchemy's default.
    """
    global _engine

    if _engine is None:
        settings = get_database_settings()
        _engine = create_async_engine(settings.async_database_url, **_engine_options(settings))
        logger.info(f"Database engine created ({'sqlite' if settings.is_sqlite else 'postgresql'})")

    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """The process-wide session factory bound to get_engine()."""
    global _session_factory

    if _session_factory is None:
        _session_factory = async_sessionmaker(
            bind=get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    return _session_factory


# =============================================================================
# SESSION SCOPES
# =============================================================================

@asynccontextmanager
async def get_db_context() -> AsyncGenerator[AsyncSession, None]:
    """
    Unit of work outside FastAPI dependency injection.

    Usage:
        async with get_db_context() as db:
            session = await crud.get_session(db, session_id)

    Commits when the block exits normally, rolls back and re-raises otherwise.
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency wrapping one request in a unit of work.

    Usage:
        @router.get("/series/{session_id}")
        async def list_series(session_id: UUID, db: AsyncSession = Depends(get_db)):
            ...
    """
    async with get_db_context() as session:
        yield session


# =============================================================================
# HEALTH CHECK & LIFECYCLE
# =============================================================================

async def check_database_connection() -> bool:
    """True when a trivial query succeeds; failures are logged, not raised."""
    try:
        async with get_db_context() as db:
            await db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False


async def create_tables() -> None:
    """Create any missing tables for the registered models."""
    # Register models on Base.metadata
    from . import models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


async def init_database() -> None:
    """
    Verify connectivity on startup and, unless CREATE_TABLES is false,
    create the schema.

    Raises:
        RuntimeError: if the database cannot be reached
    """
    logger.info("Initializing database connection...")

    if not await check_database_connection():
        raise RuntimeError("Could not connect to database")

    if get_database_settings().create_tables:
        await create_tables()


async def close_database() -> None:
    """Dispose of the engine so the next get_engine() call rebuilds it."""
    global _engine, _session_factory

    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("Database connections closed")
