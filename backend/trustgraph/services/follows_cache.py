"""Follows Cache — TTL cache of follow lists backed by the relational store.

Invariants:
    - A hit needs a FollowsFetch marker fetched within the TTL; stale or absent = miss
    - A fresh marker with zero edges is a hit returning [] (identity follows nobody)
    - cache_follows replaces edges and marker of one pubkey in a single commit:
      a reader sees the old follow-set or the new one, never a mix
    - Stale rows are ignored on read, removed only by clear_expired()

Design Decisions:
    - Injectable clock: TTL behaviour is testable without sleeping
    - IN-lists chunked (_LOOKUP_CHUNK) to stay under driver parameter limits
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, insert, select

from trustgraph.infrastructure.database import DatabaseSessionManager
from trustgraph.models.follows_cache import FollowsCacheEntry, FollowsFetch

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=6)
_LOOKUP_CHUNK = 500


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FollowsCache:
    """Per-identity follow-set cache with full-replace refresh."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.db = db
        self.ttl = ttl
        self.clock = clock

    def _cutoff(self) -> datetime:
        return self.clock() - self.ttl

    async def get_cached_follows(self, pubkey: str) -> list[str] | None:
        """Fresh follow list for pubkey, or None on miss."""
        cached = await self.get_cached_follows_batch([pubkey])
        return cached.get(pubkey)

    async def get_cached_follows_batch(
        self, pubkeys: Sequence[str],
    ) -> dict[str, list[str]]:
        """Follow lists for the subset of pubkeys whose cache is fresh."""
        cutoff = self._cutoff()
        results: dict[str, list[str]] = {}
        unique = list(dict.fromkeys(pubkeys))

        async with self.db.session() as db:
            for start in range(0, len(unique), _LOOKUP_CHUNK):
                chunk = unique[start:start + _LOOKUP_CHUNK]
                fresh = await db.execute(
                    select(FollowsFetch.pubkey)
                    .where(FollowsFetch.pubkey.in_(chunk))
                    .where(FollowsFetch.fetched_at >= cutoff)
                )
                fresh_pubkeys = list(fresh.scalars())
                if not fresh_pubkeys:
                    continue
                for pubkey in fresh_pubkeys:
                    results[pubkey] = []

                edges = await db.execute(
                    select(FollowsCacheEntry.pubkey, FollowsCacheEntry.follows_pubkey)
                    .where(FollowsCacheEntry.pubkey.in_(fresh_pubkeys))
                    .order_by(FollowsCacheEntry.id)
                )
                for pubkey, follows_pubkey in edges:
                    results[pubkey].append(follows_pubkey)

        return results

    async def cache_follows(self, pubkey: str, follows: Sequence[str]) -> None:
        """Replace everything cached for pubkey with follows, stamped now."""
        now = self.clock()
        unique = list(dict.fromkeys(follows))

        async with self.db.session() as db:
            await db.execute(
                delete(FollowsCacheEntry).where(FollowsCacheEntry.pubkey == pubkey)
            )
            await db.execute(delete(FollowsFetch).where(FollowsFetch.pubkey == pubkey))
            db.add(FollowsFetch(
                pubkey=pubkey, fetched_at=now, follows_count=len(unique),
            ))
            if unique:
                await db.execute(
                    insert(FollowsCacheEntry),
                    [
                        {"pubkey": pubkey, "follows_pubkey": f, "fetched_at": now}
                        for f in unique
                    ],
                )
            await db.commit()

    async def clear(self) -> int:
        """Drop the whole cache. Returns identities evicted."""
        async with self.db.session() as db:
            await db.execute(delete(FollowsCacheEntry))
            result = await db.execute(delete(FollowsFetch))
            await db.commit()
        logger.info(f"Follows cache cleared ({result.rowcount} identities)")
        return result.rowcount

    async def clear_expired(self) -> int:
        """Maintenance sweep for entries past the TTL. Returns identities evicted."""
        cutoff = self._cutoff()
        async with self.db.session() as db:
            await db.execute(
                delete(FollowsCacheEntry).where(FollowsCacheEntry.fetched_at < cutoff)
            )
            result = await db.execute(
                delete(FollowsFetch).where(FollowsFetch.fetched_at < cutoff)
            )
            await db.commit()
        logger.info(f"Evicted {result.rowcount} expired follow lists")
        return result.rowcount
