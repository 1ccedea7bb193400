"""Graph Stats — verifies stats, analytics and build history after a real build."""

from tests.services.fake_relay import RELAY_A, pk

S1, S2 = pk("seeder-1"), pk("seeder-2")
A, B = pk("a"), pk("b")


async def _build(container, fake_relay):
    fake_relay.publish(RELAY_A, S1, [A, B])
    fake_relay.publish(RELAY_A, S2, [A])
    await container.seeders.create_seeder(S1, "lisbon")
    await container.seeders.create_seeder(S2, "lisbon")
    return await container.builder.build_community_graph()


async def test_stats_after_build(container, fake_relay):
    await _build(container, fake_relay)

    stats = await container.stats.get_graph_stats()

    assert stats["total_nodes"] == 4
    assert stats["nodes_by_depth"] == {0: 2, 1: 2}
    assert [n["pubkey"] for n in stats["top_by_depth0"]] == [A, B]
    assert stats["last_build"]["status"] == "COMPLETED"


async def test_stats_of_empty_graph(container):
    stats = await container.stats.get_graph_stats()
    assert stats == {
        "total_nodes": 0, "nodes_by_depth": {}, "top_by_depth0": [], "last_build": None,
    }


async def test_analytics_buckets_and_top_lists(container, fake_relay):
    await _build(container, fake_relay)

    analytics = await container.stats.get_analytics()

    assert analytics["total_nodes"] == 4
    assert analytics["total_seeders"] == 2
    scores = {d["bucket"]: d["count"] for d in analytics["score_distribution"]}
    assert scores["0.8-1.0"] == 2
    assert scores["0.2-0.4"] == 1
    assert scores["0.1-0.2"] == 1
    backers = {d["bucket"]: d["count"] for d in analytics["seeder_follower_distribution"]}
    assert backers["2 seeders"] == 1
    assert backers["1 seeder"] == 1
    assert [n["pubkey"] for n in analytics["top_by_score"]] == [A, B]
    assert len(analytics["recent_builds"]) == 1


async def test_history_is_newest_first_and_limited(container, fake_relay):
    await _build(container, fake_relay)
    await container.builder.build_community_graph()
    await container.builder.build_community_graph()

    history = await container.stats.get_build_history(limit=2)

    assert len(history) == 2
    assert history[0]["started_at"] >= history[1]["started_at"]


async def test_is_build_running_follows_the_lock(container):
    assert not await container.stats.is_build_running()
    token = await container.lock.acquire()
    assert await container.stats.is_build_running()
    await container.lock.release(token)
