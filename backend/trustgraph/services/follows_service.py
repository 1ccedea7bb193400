"""Follows Service — cache-first follow lookups, relays on miss.

Invariants:
    - Fresh cache entries are served without touching a relay
    - Every miss is fetched from relays and written back to the cache, chunk by chunk
    - A fetch where no relay answered is returned as [] but NOT cached, so the next
      build retries instead of trusting an outage for a whole TTL
    - Result has one key per requested pubkey

Design Decisions:
    - Cache writes happen per completed fetch chunk: progress of a long crawl survives
      a crash mid-depth
"""

import logging
from collections.abc import Sequence

from trustgraph.services.follows_cache import FollowsCache
from trustgraph.services.follows_fetcher import FollowsFetcher

logger = logging.getLogger(__name__)


class FollowsService:
    """FollowsSource implementation: FollowsCache in front of FollowsFetcher."""

    def __init__(self, cache: FollowsCache, fetcher: FollowsFetcher):
        self.cache = cache
        self.fetcher = fetcher

    async def get_follows(self, pubkey: str) -> list[str]:
        cached = await self.cache.get_cached_follows(pubkey)
        if cached is not None:
            return cached

        result = await self.fetcher.fetch_follows_result(pubkey)
        if result.reached_any_relay:
            await self.cache.cache_follows(pubkey, result.follows)
        return result.follows

    async def get_follows_batch(
        self, pubkeys: Sequence[str],
    ) -> dict[str, list[str]]:
        unique = list(dict.fromkeys(pubkeys))
        results = await self.cache.get_cached_follows_batch(unique)
        uncached = [pk for pk in unique if pk not in results]

        logger.info(
            f"Follows lookup: {len(results)} cached, {len(uncached)} to fetch",
        )

        async for chunk in self.fetcher.iter_follows_batches(uncached):
            for pubkey, result in chunk.items():
                if result.reached_any_relay:
                    await self.cache.cache_follows(pubkey, result.follows)
                results[pubkey] = result.follows

        return results
