"""Database connection and session management."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Request
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from minilink.config import settings

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE codes for integrity violations
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def get_sqlstate(exc: DBAPIError) -> str | None:
    """Return the SQLSTATE code carried by a driver error, if any."""
    orig = getattr(exc, "orig", None)
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


# SQLAlchemy 2.0 declarative base
class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class Database:
    """
    Process-wide handle on the connection pool.

    Created once on application startup, stored on ``app.state.database``
    and disposed on shutdown.
    """

    def __init__(self, url: str | None = None, **engine_kwargs) -> None:
        url = url or settings.DATABASE_URL
        engine_kwargs.setdefault("echo", settings.LOG_LEVEL == "DEBUG")
        engine_kwargs.setdefault("pool_pre_ping", True)
        engine_kwargs.setdefault("pool_size", settings.DB_POOL_SIZE)
        engine_kwargs.setdefault("max_overflow", settings.DB_MAX_OVERFLOW)

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False,
        )

    async def create_tables(self) -> None:
        """Create all tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Provide a session that commits on success and rolls back on exception.

        Usage:
            async with database.session() as db:
                ...
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def close(self) -> None:
        """Dispose the engine and its pooled connections."""
        await self.engine.dispose()
        logger.info("Database connection pool closed")


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for FastAPI routes to get a database session.

    The session comes from the ``Database`` handle attached to the
    application during startup. Routes declare it with
    ``scope="function"`` so the commit happens before the response is
    sent, and a failed commit surfaces as a 500.

    Usage:
        @router.post("/endpoint")
        async def endpoint(db: AsyncSession = Depends(get_session, scope="function")):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
