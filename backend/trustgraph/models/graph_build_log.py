"""GraphBuildLog ORM — one record per build attempt.

Invariants:
    - status transitions: RUNNING -> COMPLETED | FAILED (never back)
    - completed_at set exactly when status leaves RUNNING
    - Rows are never deleted (build history)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from trustgraph.core.domain_types import BuildStatus
from trustgraph.db.base import Base


class GraphBuildLog(Base):
    """Audit row for one community-graph build."""
    __tablename__ = "graph_build_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BuildStatus.RUNNING.value, index=True,
    )
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    seeders_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    nodes_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
