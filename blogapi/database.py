"""
Blog API — Database Connection Handle
=======================================

What:  Async SQLAlchemy engine, session factory, and FastAPI session dependency.
Why:   Centralizes all database connection logic in one place.
How:   `connect_database()` builds an engine, verifies connectivity, and
       returns a `Database` handle. The application keeps that handle on
       `app.state.database` and hands it back to `Database.disconnect()` on
       shutdown, so no connection state lives at module level.
Who:   The application lifespan, `run_server()`, health checks, and the
       per-request session dependency.

Connection Pooling Strategy:
    PostgreSQL (asyncpg): pool_size / max_overflow / pre_ping from settings,
    connections recycled hourly.
    SQLite (aiosqlite): SQLAlchemy's default pool for the URL; the sizing
    options do not apply and are not passed.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, Optional

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

from blogapi.config import Settings, settings as default_settings
from blogapi.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, used by Alembic for migrations and by
    `Database.create_tables()` for throwaway databases.
    """
    pass


def build_engine(database_url: str, settings: Settings) -> AsyncEngine:
    """
    Create the async engine for `database_url`.

    Pool sizing options are only valid for pooled server databases, so they
    are skipped for SQLite URLs.
    """
    options = {"echo": settings.log_level == "DEBUG"}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(database_url, **options)


class Database:
    """
    Handle to a connected post store.

    Returned by `connect_database()` and required by `disconnect()`.
    Holds the engine and the session factory; sessions are created per
    request through `session()`.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        # expire_on_commit=False: returned records stay readable after commit
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @property
    def url(self) -> str:
        # Password masked for logging
        return self.engine.url.render_as_string(hide_password=True)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Provide a session that is rolled back on error and always closed.

        Gateway writes commit explicitly; this context only guarantees that a
        failed request never leaves a half-open transaction behind.
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def ping(self) -> bool:
        """Run SELECT 1 against the store. Returns False instead of raising."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def create_tables(self) -> None:
        """Create every table registered on Base.metadata that does not exist yet."""
        # Registers the models with Base.metadata
        from blogapi.models import post  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured on %s", self.url)

    async def disconnect(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()
        logger.info("Database disconnected: %s", self.url)


async def connect_database(
    database_url: Optional[str] = None,
    settings: Optional[Settings] = None,
    create_tables: Optional[bool] = None,
) -> Database:
    """
    Connect to the post store and return a `Database` handle.

    Args:
        database_url: Overrides settings.database_url
        settings: Settings to read pool options from (module singleton by default)
        create_tables: Overrides settings.db_create_tables

    Raises:
        DatabaseError: The store could not be reached. The engine is disposed
            before raising, so nothing is leaked.
    """
    settings = settings or default_settings
    url = database_url or settings.database_url
    if create_tables is None:
        create_tables = settings.db_create_tables

    database = Database(build_engine(url, settings))
    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        if create_tables:
            await database.create_tables()
    except (SQLAlchemyError, OSError) as e:
        logger.error("Could not connect to database %s: %s", database.url, str(e))
        await database.engine.dispose()
        raise DatabaseError(
            message="Could not connect to the database",
            context={"url": database.url, "error_type": type(e).__name__},
        ) from e

    logger.info("Database connected: %s", database.url)
    return database


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Uses the `Database` handle stored on the application state by the
    lifespan (or by `run_server()` / tests).
    """
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise DatabaseError(
            message="A database error occurred. Please try again later.",
            context={"reason": "database not connected"},
        )
    async with database.session() as session:
        yield session
