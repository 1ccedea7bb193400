"""Graph Stats — read-only observability over the stored graph and build logs.

Invariants:
    - Never mutates anything
    - Top lists exclude seeders (they always score 1.0 and would crowd the list)
    - Bucket distributions always carry every bucket, empty ones with count 0

Design Decisions:
    - Depth counts via GROUP BY; bucket counts computed in Python from one score scan
      (bucket edges are display concerns, kept in core/graph_analytics.py)
"""

import logging

from sqlalchemy import func, select

from trustgraph.core.graph_analytics import score_distribution, seeder_follower_distribution
from trustgraph.infrastructure.database import DatabaseSessionManager
from trustgraph.models.graph_build_log import GraphBuildLog
from trustgraph.models.graph_node import GraphNode
from trustgraph.models.seeder import CommunitySeeder
from trustgraph.services.build_lock import BuildLock

logger = logging.getLogger(__name__)

STATS_TOP_LIMIT = 10
ANALYTICS_TOP_LIMIT = 20


def _node_summary(node: GraphNode) -> dict:
    return {
        "pubkey": node.pubkey,
        "score": node.score,
        "followed_by_depth0": node.followed_by_depth0,
        "followed_by_depth1": node.followed_by_depth1,
        "followed_by_depth2": node.followed_by_depth2,
        "total_trust_followers": node.total_trust_followers,
        "min_depth": node.min_depth,
    }


def _build_summary(log: GraphBuildLog) -> dict:
    return {
        "id": log.id,
        "status": log.status,
        "started_at": log.started_at,
        "completed_at": log.completed_at,
        "seeders_count": log.seeders_count,
        "nodes_count": log.nodes_count,
        "error_message": log.error_message,
    }


class GraphStatsService:
    """Counts, top lists and build history."""

    def __init__(self, db: DatabaseSessionManager, lock: BuildLock):
        self.db = db
        self.lock = lock

    async def get_graph_stats(self) -> dict:
        async with self.db.session() as db:
            total = await db.scalar(select(func.count()).select_from(GraphNode))
            by_depth = await db.execute(
                select(GraphNode.min_depth, func.count())
                .group_by(GraphNode.min_depth)
                .order_by(GraphNode.min_depth)
            )
            top = await db.execute(
                self._top_non_seeders(GraphNode.followed_by_depth0, STATS_TOP_LIMIT)
            )
            last_build = await db.execute(
                select(GraphBuildLog).order_by(GraphBuildLog.started_at.desc()).limit(1)
            )
            last = last_build.scalar_one_or_none()

            return {
                "total_nodes": total or 0,
                "nodes_by_depth": {depth: count for depth, count in by_depth},
                "top_by_depth0": [_node_summary(n) for n in top.scalars()],
                "last_build": _build_summary(last) if last else None,
            }

    async def get_build_history(self, limit: int = 10) -> list[dict]:
        async with self.db.session() as db:
            result = await db.execute(
                select(GraphBuildLog)
                .order_by(GraphBuildLog.started_at.desc())
                .limit(limit)
            )
            return [_build_summary(log) for log in result.scalars()]

    async def is_build_running(self) -> bool:
        return await self.lock.is_held()

    async def get_analytics(self) -> dict:
        """Admin dashboard: totals, distributions, top-20 lists, recent builds."""
        async with self.db.session() as db:
            total = await db.scalar(select(func.count()).select_from(GraphNode))
            seeders = await db.scalar(select(func.count()).select_from(CommunitySeeder))
            by_depth = await db.execute(
                select(GraphNode.min_depth, func.count())
                .group_by(GraphNode.min_depth)
                .order_by(GraphNode.min_depth)
            )
            depth_distribution = [
                {"depth": depth, "count": count} for depth, count in by_depth
            ]

            scores = await db.execute(
                select(GraphNode.score, GraphNode.is_seeder, GraphNode.followed_by_depth0)
            )
            all_scores = []
            non_seeder_backers = []
            for score, is_seeder, d0 in scores:
                all_scores.append(score)
                if not is_seeder:
                    non_seeder_backers.append(d0)

            top_by_seeders = await db.execute(
                self._top_non_seeders(GraphNode.followed_by_depth0, ANALYTICS_TOP_LIMIT)
            )
            top_by_total = await db.execute(
                self._top_non_seeders(GraphNode.total_trust_followers, ANALYTICS_TOP_LIMIT)
            )
            top_by_score = await db.execute(
                self._top_non_seeders(GraphNode.score, ANALYTICS_TOP_LIMIT)
            )
            recent = await db.execute(
                select(GraphBuildLog).order_by(GraphBuildLog.started_at.desc()).limit(10)
            )

            return {
                "total_nodes": total or 0,
                "total_seeders": seeders or 0,
                "depth_distribution": depth_distribution,
                "score_distribution": score_distribution(all_scores),
                "seeder_follower_distribution": seeder_follower_distribution(
                    non_seeder_backers,
                ),
                "top_by_seeder_followers": [_node_summary(n) for n in top_by_seeders.scalars()],
                "top_by_total_followers": [_node_summary(n) for n in top_by_total.scalars()],
                "top_by_score": [_node_summary(n) for n in top_by_score.scalars()],
                "recent_builds": [_build_summary(log) for log in recent.scalars()],
            }

    @staticmethod
    def _top_non_seeders(column, limit: int):
        return (
            select(GraphNode)
            .where(GraphNode.is_seeder.is_(False))
            .order_by(column.desc(), GraphNode.pubkey)
            .limit(limit)
        )
