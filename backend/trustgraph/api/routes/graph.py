"""Graph Routes — admin/scheduler endpoints for building and inspecting the trust graph.

Invariants:
    - POST /rebuild runs the build inline; a concurrent build answers 409
    - A build that failed without a persistence error answers 500 with the BuildResult body
    - Node lookup accepts hex or npub; an identity not in the graph answers 404

Design Decisions:
    - Rebuild is synchronous: the caller is a cron job that wants the result,
      and the build lock already guards against overlapping triggers
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status

from trustgraph.api.dependencies import get_container
from trustgraph.core.errors import ErrorContext, ResourceNotFoundError
from trustgraph.core.score import classify_trust
from trustgraph.schemas.graph import (
    BuildHistoryResponse, BuildResultResponse, CacheClearResponse,
    GraphAnalyticsResponse, GraphNodeResponse, GraphStatsResponse, RecalculateResponse,
)
from trustgraph.services.container import TrustGraphContainer

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/graph", tags=["graph"])


@router.get("/stats", response_model=GraphStatsResponse)
async def get_graph_stats(container: TrustGraphContainer = Depends(get_container)):
    stats = await container.stats.get_graph_stats()
    return GraphStatsResponse(
        **stats, is_running=await container.stats.is_build_running(),
    )


@router.get("/history", response_model=BuildHistoryResponse)
async def get_build_history(
    limit: int = Query(10, ge=1, le=100),
    container: TrustGraphContainer = Depends(get_container),
):
    return BuildHistoryResponse(
        builds=await container.stats.get_build_history(limit),
        is_running=await container.stats.is_build_running(),
    )


@router.post("/rebuild", response_model=BuildResultResponse)
async def rebuild_graph(
    response: Response, container: TrustGraphContainer = Depends(get_container),
):
    """Full crawl + replace. Long-running."""
    result = await container.builder.build_community_graph()
    if not result.success:
        response.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return BuildResultResponse(
        success=result.success,
        nodes_count=result.nodes_count,
        error=result.error,
        build_id=result.build_id,
    )


@router.post("/recalculate", response_model=RecalculateResponse)
async def recalculate_scores(container: TrustGraphContainer = Depends(get_container)):
    """Re-score stored nodes with the configured weights (no crawl)."""
    return RecalculateResponse(updated=await container.scores.recalculate_scores())


@router.get("/analytics", response_model=GraphAnalyticsResponse)
async def get_graph_analytics(container: TrustGraphContainer = Depends(get_container)):
    return await container.stats.get_analytics()


@router.get("/nodes/{pubkey}", response_model=GraphNodeResponse)
async def get_graph_node(
    pubkey: str, container: TrustGraphContainer = Depends(get_container),
):
    node = await container.scores.get_graph_node(pubkey)
    if node is None:
        raise ResourceNotFoundError("Graph node", pubkey, ErrorContext(pubkey=pubkey))
    return GraphNodeResponse(
        pubkey=node.pubkey,
        score=node.score,
        followed_by_depth0=node.followed_by_depth0,
        followed_by_depth1=node.followed_by_depth1,
        followed_by_depth2=node.followed_by_depth2,
        total_trust_followers=node.total_trust_followers,
        min_depth=node.min_depth,
        is_seeder=node.is_seeder,
        trust_level=classify_trust(node.score).value,
        created_at=node.created_at,
    )


@router.delete("/follows-cache", response_model=CacheClearResponse)
async def clear_follows_cache(
    expired_only: bool = Query(False),
    container: TrustGraphContainer = Depends(get_container),
):
    """Evict cached follow lists (all, or only those past the TTL)."""
    if expired_only:
        evicted = await container.follows_cache.clear_expired()
    else:
        evicted = await container.follows_cache.clear()
    return CacheClearResponse(evicted=evicted, expired_only=expired_only)
