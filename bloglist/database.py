"""
Bloglist Backend: Database Session Management
==============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   A `Database` handle owns the engine (connection pool) and session
       factory. The application factory builds one and stores it on
       `app.state.database`; the session dependency reads it from there,
       so tests can hand the app an in-memory store.
Who:   Used by route handlers via FastAPI's dependency injection system.
When:  The handle is created with the app; sessions are created per-request.

Connection Pooling Strategy:
    PostgreSQL (asyncpg):
        pool_size / max_overflow from settings, pool_pre_ping on,
        pool_recycle=3600.
    SQLite (aiosqlite):
        In-memory URLs use a StaticPool so every session shares the one
        connection that holds the data. File URLs use SQLAlchemy's default.
"""

import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from bloglist.config import Settings, is_sqlite_url, settings as default_settings
from bloglist.exceptions import PersistenceError

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models inherit from this class to register with the shared metadata
    used by Alembic and by `Database.create_all()`.
    """
    pass


def build_engine(url: str, config: Settings = default_settings) -> AsyncEngine:
    """
    Create an async engine with pool options suited to the URL's backend.

    Args:
        url: SQLAlchemy async URL (postgresql+asyncpg://... or sqlite+aiosqlite://...)
        config: Settings providing pool sizing and log level
    """
    echo = config.log_level == "DEBUG"

    if is_sqlite_url(url):
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
            return create_async_engine(
                url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
                echo=echo,
            )
        return create_async_engine(url, echo=echo)

    return create_async_engine(
        url,
        pool_size=config.db_pool_size,
        max_overflow=config.db_max_overflow,
        pool_pre_ping=config.db_pool_pre_ping,
        pool_recycle=3600,
        echo=echo,
    )


class Database:
    """
    Storage handle: one engine plus the session factory bound to it.

    Example:
        database = Database("sqlite+aiosqlite:///:memory:")
        await database.create_all()
        async with database.session() as session:
            ...
        await database.dispose()
    """

    def __init__(self, url: Optional[str] = None, config: Settings = default_settings):
        self.url = url or config.database_url
        self.engine = build_engine(self.url, config)
        # expire_on_commit=False: attributes stay readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self) -> None:
        """Create every table registered on Base.metadata (idempotent)."""
        # Import so the model registers with Base before create_all
        from bloglist.models import blog  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def ping(self) -> bool:
        """Run SELECT 1; True when the database answered."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False
        return True

    async def dispose(self) -> None:
        """Close all pooled connections (called on application shutdown)."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the app's Database handle
        2. Yields it to the route handler
        3. On success: commits whatever the handler left open (the repository
           already commits its own writes)
        4. On error: rolls back and re-raises for the global error handler
        5. Always: closes the session (returns connection to pool)
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error("Transaction failed: %s", str(e))
            raise PersistenceError(context={"error_type": type(e).__name__}) from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
