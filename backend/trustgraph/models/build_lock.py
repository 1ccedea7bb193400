"""GraphBuildLock ORM — single-row claim that serializes graph builds.

Invariants:
    - At most one row exists (id is always LOCK_ROW_ID); its presence means "held"
    - holder is the random token of the build that owns the lock

Design Decisions:
    - Primary-key collision on INSERT is the atomic claim; works on every SQL backend
      without advisory-lock extensions
"""

from datetime import datetime

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from trustgraph.db.base import Base

LOCK_ROW_ID = 1


class GraphBuildLock(Base):
    """Held build lock."""
    __tablename__ = "graph_build_lock"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    holder: Mapped[str] = mapped_column(String(64), nullable=False)
    acquired_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
