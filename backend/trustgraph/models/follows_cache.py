"""Follows Cache ORM — cached follow edges plus one fetch marker per identity.

Invariants:
    - (pubkey, follows_pubkey) unique: a follow-set never holds duplicates
    - All edges of one pubkey share the fetched_at of its FollowsFetch marker
    - Edges and marker for a pubkey are replaced together, never merged
    - A marker with follows_count 0 means "fetched, follows nobody" (fresh empty)

Design Decisions:
    - Separate marker table: freshness lives on the identity, not on its edges, so an
      identity with zero follows is distinguishable from one never fetched
    - Stale rows are ignored on read and evicted only by the maintenance sweep
"""

from datetime import datetime

from sqlalchemy import String, Integer, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from trustgraph.db.base import Base


class FollowsCacheEntry(Base):
    """Cached edge: pubkey follows follows_pubkey."""
    __tablename__ = "follows_cache"
    __table_args__ = (
        UniqueConstraint("pubkey", "follows_pubkey", name="uq_follows_cache_edge"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pubkey: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    follows_pubkey: Mapped[str] = mapped_column(String(64), nullable=False)
    fetched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True,
    )


class FollowsFetch(Base):
    """Freshness marker: when pubkey's follow list was last fetched."""
    __tablename__ = "follows_fetches"

    pubkey: Mapped[str] = mapped_column(String(64), primary_key=True)
    fetched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True,
    )
    follows_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
