"""Graph Schemas — Pydantic models for graph build, stats and analytics responses.

Invariants:
    - BuildLogResponse mirrors graph_build_logs one-to-one
    - Bucket lists keep the display order produced by core/graph_analytics.py

Design Decisions:
    - from_attributes on row-shaped models: routes hand ORM rows or dicts interchangeably
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class BuildLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    status: Literal["RUNNING", "COMPLETED", "FAILED"]
    started_at: datetime
    completed_at: datetime | None = None
    seeders_count: int | None = None
    nodes_count: int | None = None
    error_message: str | None = None


class BuildResultResponse(BaseModel):
    """Result of a rebuild request."""
    success: bool
    nodes_count: int
    error: str | None = None
    build_id: UUID | None = None


class NodeSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    pubkey: str
    score: float
    followed_by_depth0: int
    followed_by_depth1: int
    followed_by_depth2: int
    total_trust_followers: int
    min_depth: int


class GraphNodeResponse(NodeSummary):
    """Full stored row for one identity."""
    is_seeder: bool
    trust_level: Literal["seeder", "trusted", "known", "new"]
    created_at: datetime


class GraphStatsResponse(BaseModel):
    total_nodes: int
    nodes_by_depth: dict[int, int]
    top_by_depth0: list[NodeSummary]
    last_build: BuildLogResponse | None = None
    is_running: bool = False


class BuildHistoryResponse(BaseModel):
    builds: list[BuildLogResponse]
    is_running: bool


class BucketCount(BaseModel):
    bucket: str
    count: int


class DepthCount(BaseModel):
    depth: int
    count: int


class GraphAnalyticsResponse(BaseModel):
    total_nodes: int
    total_seeders: int
    depth_distribution: list[DepthCount]
    score_distribution: list[BucketCount]
    seeder_follower_distribution: list[BucketCount]
    top_by_seeder_followers: list[NodeSummary]
    top_by_total_followers: list[NodeSummary]
    top_by_score: list[NodeSummary]
    recent_builds: list[BuildLogResponse]


class RecalculateResponse(BaseModel):
    updated: int


class CacheClearResponse(BaseModel):
    evicted: int
    expired_only: bool
