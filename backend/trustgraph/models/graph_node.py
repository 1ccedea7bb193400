"""GraphNode ORM — one row per identity in the latest community graph snapshot.

Invariants:
    - pubkey unique; the table always holds rows from exactly one build
    - total_trust_followers == followed_by_depth0 + followed_by_depth1 + followed_by_depth2
    - score == calculate_score(is_seeder, counters) for the weights in force
    - min_depth: 0 seeder, 1/2 discovered hop, 3 seen only through edge completion

Design Decisions:
    - Replaced wholesale on every build (delete-all + batch insert in one transaction);
      only recalculate_scores patches rows, and only the score column
    - Counter columns keep the snake_case names used by analytics SQL
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, Float, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from trustgraph.db.base import Base


class GraphNode(Base):
    """Identity within two hops of a seeder, with reverse-edge counters and score."""
    __tablename__ = "community_graph"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pubkey: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    is_seeder: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, index=True,
    )
    followed_by_depth0: Mapped[int] = mapped_column(
        "followed_by_depth_0", Integer, nullable=False, default=0,
    )
    followed_by_depth1: Mapped[int] = mapped_column(
        "followed_by_depth_1", Integer, nullable=False, default=0,
    )
    followed_by_depth2: Mapped[int] = mapped_column(
        "followed_by_depth_2", Integer, nullable=False, default=0,
    )
    total_trust_followers: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    min_depth: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    score: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
