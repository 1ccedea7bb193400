"""Build Lock — single-flight guard so two graph builds never overlap.

Invariants:
    - acquire() either returns a fresh holder token or raises BuildInProgressError
    - Only the holder's token can release the lock
    - A lock older than stale_after is taken over (compare-and-swap on acquired_at),
      covering builds killed mid-run

Design Decisions:
    - INSERT of a fixed primary key is the atomic claim; IntegrityError = already held.
      IntegrityError is caught inside the session block so the session manager does
      not turn it into a DatabaseError
"""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError

from trustgraph.core.errors import BuildInProgressError
from trustgraph.infrastructure.database import DatabaseSessionManager
from trustgraph.models.build_lock import GraphBuildLock, LOCK_ROW_ID

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BuildLock:
    """Row-based mutual exclusion for graph builds."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        stale_after: timedelta = timedelta(minutes=60),
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.db = db
        self.stale_after = stale_after
        self.clock = clock

    async def acquire(self) -> str:
        token = uuid.uuid4().hex
        now = self.clock()

        async with self.db.session() as db:
            try:
                db.add(GraphBuildLock(id=LOCK_ROW_ID, holder=token, acquired_at=now))
                await db.commit()
                return token
            except IntegrityError:
                await db.rollback()

            result = await db.execute(
                update(GraphBuildLock)
                .where(GraphBuildLock.id == LOCK_ROW_ID)
                .where(GraphBuildLock.acquired_at < now - self.stale_after)
                .values(holder=token, acquired_at=now)
            )
            await db.commit()
            if result.rowcount == 1:
                logger.warning("Took over stale graph build lock")
                return token

        raise BuildInProgressError()

    async def release(self, token: str) -> None:
        async with self.db.session() as db:
            await db.execute(
                delete(GraphBuildLock)
                .where(GraphBuildLock.id == LOCK_ROW_ID)
                .where(GraphBuildLock.holder == token)
            )
            await db.commit()

    async def is_held(self) -> bool:
        async with self.db.session() as db:
            result = await db.execute(
                select(GraphBuildLock.holder).where(GraphBuildLock.id == LOCK_ROW_ID)
            )
            return result.scalar_one_or_none() is not None

    async def clear_stale(self) -> bool:
        """Drop a lock older than stale_after. True if one was dropped."""
        async with self.db.session() as db:
            result = await db.execute(
                delete(GraphBuildLock)
                .where(GraphBuildLock.acquired_at < self.clock() - self.stale_after)
            )
            await db.commit()
        return result.rowcount > 0
