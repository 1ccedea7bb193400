"""Crawl Graph — in-memory accumulation of the two-hop community graph.

Invariants:
    - Seeders sit at depth 0 and their depth is never overwritten
    - Depth only ever decreases: a node's depth is the shallowest level it was found at
    - Depth-1 identities = followees of seeders that are not seeders
    - Depth-2 identities = followees of depth-1 identities that are neither seeders nor depth-1
    - Followees of depth-2 identities only gain depth-2 reverse edges; they are never
      crawled further (nodes first seen there get EDGE_COMPLETION_DEPTH)
    - A node is relevant iff it is a seeder or has at least one reverse edge

Design Decisions:
    - Reverse edges kept as sets of backer pubkeys: counting the same backer twice is
      impossible, whatever order relays return tags in
    - Pure and synchronous: the builder feeds it follow maps and persists its rows,
      so the whole crawl logic is unit-testable without a relay or a database
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from trustgraph.core.score import DEFAULT_WEIGHTS, ScoreWeights, calculate_score

SEEDER_DEPTH = 0
EDGE_COMPLETION_DEPTH = 3
UNDISCOVERED_DEPTH = 999


@dataclass
class UserNode:
    """One identity reachable from the seeders, with its reverse edges per depth."""
    pubkey: str
    depth: int = UNDISCOVERED_DEPTH
    is_seeder: bool = False
    followed_by_depth0: set[str] = field(default_factory=set)
    followed_by_depth1: set[str] = field(default_factory=set)
    followed_by_depth2: set[str] = field(default_factory=set)

    def reach(self, depth: int) -> None:
        if not self.is_seeder and depth < self.depth:
            self.depth = depth

    @property
    def min_depth(self) -> int:
        return SEEDER_DEPTH if self.is_seeder else self.depth

    @property
    def is_relevant(self) -> bool:
        return self.is_seeder or bool(
            self.followed_by_depth0
            or self.followed_by_depth1
            or self.followed_by_depth2
        )

    def to_row(self, weights: ScoreWeights = DEFAULT_WEIGHTS) -> dict:
        """Flatten to a community_graph row (counters + score)."""
        d0 = len(self.followed_by_depth0)
        d1 = len(self.followed_by_depth1)
        d2 = len(self.followed_by_depth2)
        return {
            "pubkey": self.pubkey,
            "is_seeder": self.is_seeder,
            "followed_by_depth0": d0,
            "followed_by_depth1": d1,
            "followed_by_depth2": d2,
            "total_trust_followers": d0 + d1 + d2,
            "min_depth": self.min_depth,
            "score": calculate_score(self.is_seeder, d0, d1, d2, weights),
        }


class CrawlGraph:
    """Node map for one build run, filled depth by depth."""

    def __init__(self) -> None:
        self.nodes: dict[str, UserNode] = {}
        self.seeders: set[str] = set()
        self.depth1: set[str] = set()
        self.depth2: set[str] = set()

    def node(self, pubkey: str) -> UserNode:
        found = self.nodes.get(pubkey)
        if found is None:
            found = UserNode(pubkey=pubkey)
            self.nodes[pubkey] = found
        return found

    def add_seeders(self, pubkeys: Iterable[str]) -> set[str]:
        for pubkey in pubkeys:
            node = self.node(pubkey)
            node.depth = SEEDER_DEPTH
            node.is_seeder = True
            self.seeders.add(pubkey)
        return self.seeders

    def record_seeder_follows(
        self, follows_by_seeder: Mapping[str, Iterable[str]],
    ) -> set[str]:
        """Depth-0 hop. Returns the depth-1 frontier."""
        for seeder, follows in follows_by_seeder.items():
            for followee in follows:
                if followee in self.seeders:
                    continue
                node = self.node(followee)
                node.reach(1)
                node.followed_by_depth0.add(seeder)
                self.depth1.add(followee)
        return self.depth1

    def record_depth1_follows(
        self, follows_by_depth1: Mapping[str, Iterable[str]],
    ) -> set[str]:
        """Depth-1 hop. Returns the depth-2 frontier."""
        for backer, follows in follows_by_depth1.items():
            for followee in follows:
                if followee in self.seeders or followee in self.depth1:
                    continue
                node = self.node(followee)
                node.reach(2)
                node.followed_by_depth1.add(backer)
                self.depth2.add(followee)
        return self.depth2

    def record_depth2_follows(
        self, follows_by_depth2: Mapping[str, Iterable[str]],
    ) -> None:
        """Edge completion only: credit depth-2 backers, open no new frontier."""
        for backer, follows in follows_by_depth2.items():
            for followee in follows:
                node = self.node(followee)
                node.reach(EDGE_COMPLETION_DEPTH)
                node.followed_by_depth2.add(backer)

    def relevant_nodes(self) -> list[UserNode]:
        return [n for n in self.nodes.values() if n.is_relevant]
