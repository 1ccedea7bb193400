"""Trust Score Service — score lookups against the stored graph, plus offline recalculation.

Invariants:
    - Identities not in community_graph get default_score, never an error
    - Lookups accept hex or npub; junk input falls through to the default
    - recalculate_scores touches only the score column and never the network

Design Decisions:
    - Batch lookups return one key per requested identity, keyed as the caller spelled it
    - Recalculation uses ORM bulk UPDATE by primary key in chunks
"""

import logging
from collections.abc import Iterable

from sqlalchemy import select, update

from trustgraph.core.pubkeys import lookup_key
from trustgraph.core.score import (
    DEFAULT_TRUST_SCORE, DEFAULT_WEIGHTS, ScoreWeights, calculate_score,
)
from trustgraph.infrastructure.database import DatabaseSessionManager
from trustgraph.models.graph_node import GraphNode

logger = logging.getLogger(__name__)

_LOOKUP_CHUNK = 500
_UPDATE_CHUNK = 1000


class TrustScoreService:
    """Reads scores from the latest graph snapshot."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        weights: ScoreWeights = DEFAULT_WEIGHTS,
        default_score: float = DEFAULT_TRUST_SCORE,
    ):
        self.db = db
        self.weights = weights
        self.default_score = default_score

    async def get_trust_score(self, pubkey: str) -> float:
        async with self.db.session() as db:
            result = await db.execute(
                select(GraphNode.score).where(GraphNode.pubkey == lookup_key(pubkey))
            )
            score = result.scalar_one_or_none()
        return self.default_score if score is None else score

    async def get_trust_scores(self, pubkeys: Iterable[str]) -> dict[str, float]:
        """Scores for many identities in one pass; missing ones get the default."""
        requested = list(dict.fromkeys(pubkeys))
        keys = {pk: lookup_key(pk) for pk in requested}
        unique_keys = list(dict.fromkeys(keys.values()))
        found: dict[str, float] = {}

        async with self.db.session() as db:
            for start in range(0, len(unique_keys), _LOOKUP_CHUNK):
                chunk = unique_keys[start:start + _LOOKUP_CHUNK]
                result = await db.execute(
                    select(GraphNode.pubkey, GraphNode.score)
                    .where(GraphNode.pubkey.in_(chunk))
                )
                found.update({pubkey: score for pubkey, score in result})

        return {pk: found.get(keys[pk], self.default_score) for pk in requested}

    async def get_graph_node(self, pubkey: str) -> GraphNode | None:
        async with self.db.session() as db:
            result = await db.execute(
                select(GraphNode).where(GraphNode.pubkey == lookup_key(pubkey))
            )
            return result.scalar_one_or_none()

    async def recalculate_scores(self) -> int:
        """Recompute every stored score from stored counters. Returns rows updated."""
        async with self.db.session() as db:
            result = await db.execute(
                select(
                    GraphNode.id,
                    GraphNode.is_seeder,
                    GraphNode.followed_by_depth0,
                    GraphNode.followed_by_depth1,
                    GraphNode.followed_by_depth2,
                )
            )
            rows = [
                {"id": node_id, "score": calculate_score(is_seeder, d0, d1, d2, self.weights)}
                for node_id, is_seeder, d0, d1, d2 in result
            ]
            for start in range(0, len(rows), _UPDATE_CHUNK):
                await db.execute(update(GraphNode), rows[start:start + _UPDATE_CHUNK])
            await db.commit()

        logger.info(f"Recalculated {len(rows)} trust scores", extra={"nodes_count": len(rows)})
        return len(rows)
