"""Follows Service — verifies cache-first lookups and write-back rules.

Tests:
    - Fresh cache entries never reach a relay
    - Misses are fetched and cached, including zero-follow answers
    - Answers from a total relay outage are returned but not cached
    - A relay timing out before EOSE is an outage, not an empty follow list
"""

from trustgraph.services.follows_cache import FollowsCache
from trustgraph.services.follows_fetcher import FollowsFetcher
from trustgraph.services.follows_service import FollowsService

from tests.services.fake_relay import RELAY_A, pk

ALICE, BOB, CAROL = pk("alice"), pk("bob"), pk("carol")


def _service(db_manager, fake_relay, clock):
    cache = FollowsCache(db_manager, clock=clock)
    fetcher = FollowsFetcher(fake_relay, [RELAY_A], timeout_seconds=0.2, batch_size=2)
    return FollowsService(cache, fetcher), cache


async def test_cached_entry_skips_relays(db_manager, fake_relay, clock):
    service, cache = _service(db_manager, fake_relay, clock)
    await cache.cache_follows(ALICE, [BOB])

    assert await service.get_follows(ALICE) == [BOB]
    assert fake_relay.calls == []


async def test_miss_is_fetched_and_cached(db_manager, fake_relay, clock):
    service, cache = _service(db_manager, fake_relay, clock)
    fake_relay.publish(RELAY_A, ALICE, [CAROL])

    assert await service.get_follows(ALICE) == [CAROL]
    assert await cache.get_cached_follows(ALICE) == [CAROL]


async def test_outage_is_not_cached(db_manager, fake_relay, clock):
    service, cache = _service(db_manager, fake_relay, clock)
    fake_relay.failing.add(RELAY_A)

    assert await service.get_follows(ALICE) == []
    assert await cache.get_cached_follows(ALICE) is None


async def test_silent_relay_is_not_cached_as_empty(db_manager, fake_relay, clock):
    cache = FollowsCache(db_manager, clock=clock)
    fetcher = FollowsFetcher(fake_relay, [RELAY_A], timeout_seconds=0.05)
    service = FollowsService(cache, fetcher)
    fake_relay.publish(RELAY_A, ALICE, [BOB])
    fake_relay.delays[RELAY_A] = 1.0

    assert await service.get_follows(ALICE) == []
    assert await cache.get_cached_follows(ALICE) is None

    del fake_relay.delays[RELAY_A]
    clock.advance(hours=5)

    assert await service.get_follows(ALICE) == [BOB]
    assert await cache.get_cached_follows(ALICE) == [BOB]


async def test_batch_mixes_cache_and_relays(db_manager, fake_relay, clock):
    service, cache = _service(db_manager, fake_relay, clock)
    await cache.cache_follows(ALICE, [BOB])
    fake_relay.publish(RELAY_A, BOB, [CAROL])

    result = await service.get_follows_batch([ALICE, BOB, CAROL])

    assert result == {ALICE: [BOB], BOB: [CAROL], CAROL: []}
    assert {author for _, author in fake_relay.calls} == {BOB, CAROL}
    assert await cache.get_cached_follows(CAROL) == []
