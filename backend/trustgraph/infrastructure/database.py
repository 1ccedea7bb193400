"""Database Session Manager — async pool for the graph, cache, lock and review tables.

Invariants:
    - Every session rolls back on exception: a failed graph replace leaves the
      previous community_graph untouched
    - SQLAlchemy errors escaping a session surface as DatabaseError (core/errors.py),
      which the graph builder re-raises after marking the build FAILED
    - Callers that expect a constraint violation (BuildLock claim, duplicate
      seeder) catch IntegrityError INSIDE the session block; only unexpected
      violations reach the mapping here

Design Decisions:
    - No module-level singleton: the process entry point builds one manager and
      passes it to every service (services/container.py)
    - expire_on_commit=False: rows handed to schemas after commit stay readable
    - SQLite URLs skip pool sizing (aiosqlite pools differ); from_engine() lets tests
      hand in their own in-memory engine
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from trustgraph.core.errors import DatabaseError

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Hands out AsyncSessions bound to one engine; maps driver errors to DatabaseError."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        if database_url.startswith("sqlite"):
            engine = create_async_engine(database_url)
        else:
            engine = create_async_engine(
                database_url,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
                pool_recycle=3600,
            )
        self._bind(engine)

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "DatabaseSessionManager":
        manager = cls.__new__(cls)
        manager._bind(engine)
        return manager

    def _bind(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            operation, message = _classify(e)
            logger.error(f"{message}: {e}", extra={"error_code": "DATABASE_ERROR"})
            raise DatabaseError(message, operation) from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """SELECT 1 through a session (readiness probe)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except (DatabaseError, OSError) as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


def _classify(error: SQLAlchemyError) -> tuple[str, str]:
    """(operation, message) for the DatabaseError raised in place of error."""
    if isinstance(error, IntegrityError):
        return "commit", "Integrity constraint violated"
    if isinstance(error, OperationalError):
        return "execute", "Connection or operational error"
    if isinstance(error, DBAPIError):
        return "query", "Database driver error"
    return "unknown", "Database operation failed"
