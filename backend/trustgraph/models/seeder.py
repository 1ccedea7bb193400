"""CommunitySeeder ORM — curated root identities that define depth 0 of the trust graph.

Invariants:
    - pubkey is unique, 64 lower-case hex (normalized before insert)
    - region is non-nullable (seeders are curated per region/category)

Design Decisions:
    - No FK from community_graph to seeders: the graph is rebuilt wholesale, so a
      removed seeder disappears from the graph on the next build
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from trustgraph.db.base import Base


class CommunitySeeder(Base):
    """Trusted root identity."""
    __tablename__ = "community_seeders"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    pubkey: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True,
    )
    region: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    label: Mapped[str | None] = mapped_column(String(200), nullable=True)
    added_by: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
