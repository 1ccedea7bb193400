"""Crawl Graph — verifies depth bookkeeping and reverse-edge counters of one build.

Tests:
    - S1 → A → {S1, B} → C chain yields the expected depths, counters and scores
    - Identities beyond depth 2 are never discovered
    - Follows pointing back at seeders / depth-1 identities open no frontier
    - Edge completion credits depth-2 backers without adding a frontier
    - Irrelevant nodes are filtered out
"""

import pytest

from trustgraph.core.crawl import (
    EDGE_COMPLETION_DEPTH, SEEDER_DEPTH, CrawlGraph, UserNode,
)

S1, S2 = "s1" * 32, "s2" * 32
A, B, C, D, E = ("a" * 64, "b" * 64, "c" * 64, "d" * 64, "e" * 64)


def _rows(graph: CrawlGraph) -> dict[str, dict]:
    return {n.pubkey: n.to_row() for n in graph.relevant_nodes()}


def _chain_graph() -> CrawlGraph:
    graph = CrawlGraph()
    graph.add_seeders([S1])
    depth1 = graph.record_seeder_follows({S1: [A]})
    depth2 = graph.record_depth1_follows({pk: {A: [S1, B]}.get(pk, []) for pk in depth1})
    graph.record_depth2_follows({pk: {B: [C]}.get(pk, []) for pk in depth2})
    return graph


def test_chain_produces_expected_depths_and_scores():
    rows = _rows(_chain_graph())

    assert set(rows) == {S1, A, B, C}
    assert rows[S1]["min_depth"] == SEEDER_DEPTH
    assert rows[S1]["score"] == 1.0
    assert rows[A]["followed_by_depth0"] == 1
    assert rows[A]["min_depth"] == 1
    assert rows[A]["score"] == pytest.approx(0.15)
    assert rows[B]["followed_by_depth1"] == 1
    assert rows[B]["min_depth"] == 2
    assert rows[B]["score"] == pytest.approx(0.02)
    assert rows[C]["followed_by_depth2"] == 1
    assert rows[C]["min_depth"] == EDGE_COMPLETION_DEPTH
    assert rows[C]["score"] == pytest.approx(0.005)


def test_frontiers_stop_at_depth_two():
    graph = _chain_graph()
    assert graph.depth1 == {A}
    assert graph.depth2 == {B}
    assert D not in graph.nodes


def test_total_trust_followers_is_sum_of_counters():
    graph = CrawlGraph()
    graph.add_seeders([S1, S2])
    graph.record_seeder_follows({S1: [A, B], S2: [A]})
    graph.record_depth1_follows({A: [C], B: [C]})
    graph.record_depth2_follows({C: [A]})

    row = _rows(graph)[A]
    assert row["followed_by_depth0"] == 2
    assert row["followed_by_depth2"] == 1
    assert row["total_trust_followers"] == 3
    assert row["min_depth"] == 1


def test_seeder_following_seeder_is_not_a_depth1_discovery():
    graph = CrawlGraph()
    graph.add_seeders([S1, S2])
    depth1 = graph.record_seeder_follows({S1: [S2], S2: []})

    assert depth1 == set()
    assert _rows(graph)[S2]["followed_by_depth0"] == 0


def test_depth1_following_seeders_or_depth1_opens_no_frontier():
    graph = CrawlGraph()
    graph.add_seeders([S1])
    graph.record_seeder_follows({S1: [A, B]})
    depth2 = graph.record_depth1_follows({A: [S1, B], B: [E]})

    assert depth2 == {E}
    assert _rows(graph)[B]["followed_by_depth1"] == 0


def test_edge_completion_credits_depth2_backers_of_known_nodes():
    graph = CrawlGraph()
    graph.add_seeders([S1])
    graph.record_seeder_follows({S1: [A]})
    graph.record_depth1_follows({A: [B]})
    graph.record_depth2_follows({B: [S1, A]})

    rows = _rows(graph)
    assert rows[A]["followed_by_depth2"] == 1
    assert rows[A]["min_depth"] == 1
    assert rows[S1]["followed_by_depth2"] == 1
    assert rows[S1]["score"] == 1.0


def test_duplicate_backer_counts_once():
    graph = CrawlGraph()
    graph.add_seeders([S1])
    graph.record_seeder_follows({S1: [A, A]})
    assert _rows(graph)[A]["followed_by_depth0"] == 1


def test_node_without_backers_is_not_relevant():
    assert not UserNode(pubkey=D).is_relevant
    assert UserNode(pubkey=D, is_seeder=True).is_relevant


def test_seeders_without_follows_still_appear():
    graph = CrawlGraph()
    graph.add_seeders([S1])
    graph.record_seeder_follows({S1: []})
    assert set(_rows(graph)) == {S1}
