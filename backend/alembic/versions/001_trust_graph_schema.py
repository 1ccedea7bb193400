"""Trust graph schema — seeders, follows cache, community graph, build logs, reviews.

Revision ID: 001_trust_graph
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_trust_graph"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "community_seeders",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("pubkey", sa.String(64), nullable=False, unique=True),
        sa.Column("region", sa.String(100), nullable=False),
        sa.Column("label", sa.String(200), nullable=True),
        sa.Column("added_by", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_community_seeders_region", "community_seeders", ["region"])

    op.create_table(
        "follows_cache",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("pubkey", sa.String(64), nullable=False),
        sa.Column("follows_pubkey", sa.String(64), nullable=False),
        sa.Column("fetched_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("pubkey", "follows_pubkey", name="uq_follows_cache_edge"),
    )
    op.create_index("ix_follows_cache_pubkey", "follows_cache", ["pubkey"])
    op.create_index("ix_follows_cache_fetched_at", "follows_cache", ["fetched_at"])

    op.create_table(
        "follows_fetches",
        sa.Column("pubkey", sa.String(64), primary_key=True),
        sa.Column("fetched_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("follows_count", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index("ix_follows_fetches_fetched_at", "follows_fetches", ["fetched_at"])

    op.create_table(
        "community_graph",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("pubkey", sa.String(64), nullable=False, unique=True),
        sa.Column("is_seeder", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("followed_by_depth_0", sa.Integer, nullable=False, server_default="0"),
        sa.Column("followed_by_depth_1", sa.Integer, nullable=False, server_default="0"),
        sa.Column("followed_by_depth_2", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_trust_followers", sa.Integer, nullable=False, server_default="0"),
        sa.Column("min_depth", sa.Integer, nullable=False),
        sa.Column("score", sa.Float, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_community_graph_is_seeder", "community_graph", ["is_seeder"])
    op.create_index("ix_community_graph_min_depth", "community_graph", ["min_depth"])
    op.create_index("ix_community_graph_score", "community_graph", ["score"])

    op.create_table(
        "graph_build_logs",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="RUNNING"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("seeders_count", sa.Integer, nullable=True),
        sa.Column("nodes_count", sa.Integer, nullable=True),
        sa.Column("error_message", sa.Text, nullable=True),
    )
    op.create_index("ix_graph_build_logs_status", "graph_build_logs", ["status"])
    op.create_index("ix_graph_build_logs_started_at", "graph_build_logs", ["started_at"])

    op.create_table(
        "graph_build_lock",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("holder", sa.String(64), nullable=False),
        sa.Column("acquired_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "reviews",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("event_id", sa.String(64), nullable=False, unique=True),
        sa.Column("subject_id", sa.String(100), nullable=False),
        sa.Column("author_pubkey", sa.String(64), nullable=False),
        sa.Column("rating", sa.Integer, nullable=True),
        sa.Column("content", sa.Text, nullable=True),
        sa.Column("event_created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("indexed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_reviews_subject_id", "reviews", ["subject_id"])
    op.create_index("ix_reviews_author_pubkey", "reviews", ["author_pubkey"])

    op.create_table(
        "review_replies",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("event_id", sa.String(64), nullable=False, unique=True),
        sa.Column(
            "review_id", sa.Uuid,
            sa.ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("author_pubkey", sa.String(64), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("is_owner_reply", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("event_created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("indexed_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("review_replies")
    op.drop_index("ix_reviews_author_pubkey", "reviews")
    op.drop_index("ix_reviews_subject_id", "reviews")
    op.drop_table("reviews")
    op.drop_table("graph_build_lock")
    op.drop_index("ix_graph_build_logs_started_at", "graph_build_logs")
    op.drop_index("ix_graph_build_logs_status", "graph_build_logs")
    op.drop_table("graph_build_logs")
    op.drop_index("ix_community_graph_score", "community_graph")
    op.drop_index("ix_community_graph_min_depth", "community_graph")
    op.drop_index("ix_community_graph_is_seeder", "community_graph")
    op.drop_table("community_graph")
    op.drop_index("ix_follows_fetches_fetched_at", "follows_fetches")
    op.drop_table("follows_fetches")
    op.drop_index("ix_follows_cache_fetched_at", "follows_cache")
    op.drop_index("ix_follows_cache_pubkey", "follows_cache")
    op.drop_table("follows_cache")
    op.drop_index("ix_community_seeders_region", "community_seeders")
    op.drop_table("community_seeders")
