"""Graph Builder — crawls seeders → depth 1 → depth 2, scores nodes, replaces the graph.

Invariants:
    - Runs under BuildLock: a second concurrent build raises BuildInProgressError
      before any build log is written
    - Build log goes RUNNING → COMPLETED | FAILED, finalized on every exit path
    - Zero seeders is a COMPLETED build with zero nodes (not an error)
    - Depths are crawled strictly in sequence; depth-2 follows only complete edges
    - community_graph replace (delete-all + batched insert) commits as one transaction:
      readers see the previous graph or the new one, never a mix
    - Relay trouble never fails a build (absorbed by the fetcher); persistence errors
      mark the log FAILED and are re-raised; other errors return success=False

Design Decisions:
    - Crawl bookkeeping lives in core/crawl.py (pure); this class is only the
      imperative shell: lock, log, fetch, persist
    - Seeders loaded sorted: fetch order (and thus logs) is deterministic across runs
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from trustgraph.core.crawl import CrawlGraph, UserNode
from trustgraph.core.domain_types import BuildStatus
from trustgraph.core.errors import DatabaseError
from trustgraph.core.repository_protocols import FollowsSource
from trustgraph.core.score import DEFAULT_WEIGHTS, ScoreWeights
from trustgraph.infrastructure.database import DatabaseSessionManager
from trustgraph.models.graph_build_log import GraphBuildLog
from trustgraph.models.graph_node import GraphNode
from trustgraph.models.seeder import CommunitySeeder
from trustgraph.services.build_lock import BuildLock

logger = logging.getLogger(__name__)

PROCESS_RESTARTED = "process restarted"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class BuildResult:
    """Outcome of build_community_graph."""
    success: bool
    nodes_count: int
    error: str | None = None
    build_id: uuid.UUID | None = None


class GraphBuilder:
    """Builds and persists the community trust graph."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        follows: FollowsSource,
        lock: BuildLock,
        weights: ScoreWeights = DEFAULT_WEIGHTS,
        insert_batch_size: int = 1000,
        stale_after: timedelta = timedelta(minutes=60),
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.db = db
        self.follows = follows
        self.lock = lock
        self.weights = weights
        self.insert_batch_size = insert_batch_size
        self.stale_after = stale_after
        self.clock = clock

    async def build_community_graph(self) -> BuildResult:
        """Full rebuild. Raises BuildInProgressError if another build holds the lock."""
        token = await self.lock.acquire()
        try:
            return await self._run_build()
        finally:
            await self.lock.release(token)

    async def _run_build(self) -> BuildResult:
        build_id = await self._start_log()
        try:
            seeders = await self._load_seeders()
            if not seeders:
                await self._finish_log(
                    build_id, BuildStatus.COMPLETED, seeders_count=0, nodes_count=0,
                )
                logger.info("No seeders, empty graph", extra={"build_id": str(build_id)})
                return BuildResult(success=True, nodes_count=0, build_id=build_id)

            logger.info(
                f"Starting build with {len(seeders)} seeders",
                extra={"build_id": str(build_id), "seeders_count": len(seeders)},
            )
            nodes = await self._crawl(seeders)
            await self._replace_graph(nodes)
            await self._finish_log(
                build_id, BuildStatus.COMPLETED,
                seeders_count=len(seeders), nodes_count=len(nodes),
            )
            logger.info(
                f"Build completed with {len(nodes)} nodes",
                extra={"build_id": str(build_id), "nodes_count": len(nodes)},
            )
            return BuildResult(success=True, nodes_count=len(nodes), build_id=build_id)

        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error(
                f"Build failed: {message}",
                extra={"build_id": str(build_id)}, exc_info=True,
            )
            await self._finish_log(build_id, BuildStatus.FAILED, error_message=message)
            if isinstance(e, (DatabaseError, SQLAlchemyError)):
                raise
            return BuildResult(
                success=False, nodes_count=0, error=message, build_id=build_id,
            )

    async def _crawl(self, seeders: list[str]) -> list[UserNode]:
        graph = CrawlGraph()
        graph.add_seeders(seeders)

        depth1 = graph.record_seeder_follows(
            await self.follows.get_follows_batch(sorted(graph.seeders)),
        )
        logger.info(
            f"Found {len(depth1)} users at depth 1",
            extra={"depth": 1, "frontier": len(depth1)},
        )

        depth2 = graph.record_depth1_follows(
            await self.follows.get_follows_batch(sorted(depth1)),
        )
        logger.info(
            f"Found {len(depth2)} users at depth 2",
            extra={"depth": 2, "frontier": len(depth2)},
        )

        graph.record_depth2_follows(
            await self.follows.get_follows_batch(sorted(depth2)),
        )

        relevant = graph.relevant_nodes()
        logger.info(f"Total relevant nodes: {len(relevant)}")
        return relevant

    async def _replace_graph(self, nodes: list[UserNode]) -> None:
        rows = [node.to_row(self.weights) for node in nodes]
        batches = max(1, -(-len(rows) // self.insert_batch_size))

        async with self.db.session() as db:
            await db.execute(delete(GraphNode))
            for i, start in enumerate(range(0, len(rows), self.insert_batch_size)):
                await db.execute(
                    insert(GraphNode), rows[start:start + self.insert_batch_size],
                )
                logger.info(f"Inserted batch {i + 1}/{batches}")
            await db.commit()

    async def _load_seeders(self) -> list[str]:
        async with self.db.session() as db:
            result = await db.execute(
                select(CommunitySeeder.pubkey).order_by(CommunitySeeder.pubkey)
            )
            return list(result.scalars())

    async def _start_log(self) -> uuid.UUID:
        async with self.db.session() as db:
            log = GraphBuildLog(
                status=BuildStatus.RUNNING.value, started_at=self.clock(),
            )
            db.add(log)
            await db.commit()
            return log.id

    async def _finish_log(
        self,
        build_id: uuid.UUID,
        status: BuildStatus,
        seeders_count: int | None = None,
        nodes_count: int | None = None,
        error_message: str | None = None,
    ) -> None:
        async with self.db.session() as db:
            await db.execute(
                update(GraphBuildLog)
                .where(GraphBuildLog.id == build_id)
                .values(
                    status=status.value,
                    completed_at=self.clock(),
                    seeders_count=seeders_count,
                    nodes_count=nodes_count,
                    error_message=error_message,
                )
            )
            await db.commit()

    async def reconcile_stale_builds(self) -> int:
        """Startup sweep: RUNNING logs older than stale_after become FAILED."""
        cutoff = self.clock() - self.stale_after
        async with self.db.session() as db:
            result = await db.execute(
                update(GraphBuildLog)
                .where(GraphBuildLog.status == BuildStatus.RUNNING.value)
                .where(GraphBuildLog.started_at < cutoff)
                .values(
                    status=BuildStatus.FAILED.value,
                    completed_at=self.clock(),
                    error_message=PROCESS_RESTARTED,
                )
            )
            await db.commit()
        await self.lock.clear_stale()
        if result.rowcount:
            logger.warning(f"Marked {result.rowcount} abandoned builds as FAILED")
        return result.rowcount
