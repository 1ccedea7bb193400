"""Service Container — wires settings into one set of service instances per process.

Invariants:
    - Built once in the FastAPI lifespan and stored on app.state.container
    - close() releases the relay transport and the connection pool, in that order
    - Every service shares the same DatabaseSessionManager and BuildLock

Design Decisions:
    - Plain dataclass over a DI framework: a dozen objects, wired explicitly
    - db / transport injectable: tests pass an in-memory SQLite manager and a fake relay
"""

import logging
from dataclasses import dataclass
from datetime import timedelta

from trustgraph.config import Settings
from trustgraph.core.repository_protocols import RelayTransport
from trustgraph.core.score import ScoreWeights
from trustgraph.infrastructure.database import DatabaseSessionManager
from trustgraph.infrastructure.relay_transport import AiohttpRelayTransport
from trustgraph.services.build_lock import BuildLock
from trustgraph.services.follows_cache import FollowsCache
from trustgraph.services.follows_fetcher import FollowsFetcher
from trustgraph.services.follows_service import FollowsService
from trustgraph.services.graph_builder import GraphBuilder
from trustgraph.services.graph_stats import GraphStatsService
from trustgraph.services.review_trust import ReviewTrustService
from trustgraph.services.seeders import SeederService
from trustgraph.services.trust_scores import TrustScoreService

logger = logging.getLogger(__name__)


@dataclass
class TrustGraphContainer:
    db: DatabaseSessionManager
    transport: RelayTransport
    follows_cache: FollowsCache
    follows: FollowsService
    lock: BuildLock
    builder: GraphBuilder
    scores: TrustScoreService
    stats: GraphStatsService
    seeders: SeederService
    reviews: ReviewTrustService

    async def close(self) -> None:
        await self.transport.close()
        await self.db.dispose()


def weights_from_settings(settings: Settings) -> ScoreWeights:
    return ScoreWeights(
        is_seeder=settings.score_is_seeder,
        per_depth0_follower=settings.score_per_depth0_follower,
        per_depth1_follower=settings.score_per_depth1_follower,
        per_depth2_follower=settings.score_per_depth2_follower,
        max_score=settings.score_max,
    )


def build_container(
    settings: Settings,
    db: DatabaseSessionManager | None = None,
    transport: RelayTransport | None = None,
) -> TrustGraphContainer:
    db = db or DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    transport = transport or AiohttpRelayTransport(
        connect_timeout=settings.relay_connect_timeout_seconds,
    )
    weights = weights_from_settings(settings)
    stale_after = timedelta(minutes=settings.stale_build_threshold_minutes)

    follows_cache = FollowsCache(db, ttl=timedelta(hours=settings.follows_cache_ttl_hours))
    fetcher = FollowsFetcher(
        transport,
        settings.nostr_relays,
        timeout_seconds=settings.relay_timeout_seconds,
        batch_size=settings.fetch_batch_size,
    )
    follows = FollowsService(follows_cache, fetcher)
    lock = BuildLock(db, stale_after=stale_after)
    scores = TrustScoreService(
        db, weights=weights, default_score=settings.default_trust_score,
    )

    logger.info(f"Services wired for {len(settings.nostr_relays)} relays")
    return TrustGraphContainer(
        db=db,
        transport=transport,
        follows_cache=follows_cache,
        follows=follows,
        lock=lock,
        builder=GraphBuilder(
            db, follows, lock,
            weights=weights,
            insert_batch_size=settings.graph_insert_batch_size,
            stale_after=stale_after,
        ),
        scores=scores,
        stats=GraphStatsService(db, lock),
        seeders=SeederService(db),
        reviews=ReviewTrustService(db, scores),
    )
