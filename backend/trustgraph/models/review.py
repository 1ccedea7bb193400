"""Review ORM — Nostr venue reviews and their replies, read by the trust aggregator.

Invariants:
    - event_id unique (one row per Nostr event)
    - subject_id is the reviewed venue (OSM id like "node/123456")
    - rating optional (1-5), content optional
    - Replies belong to one review and load ordered oldest-first

Design Decisions:
    - The trust core only reads these rows; indexing lives with the review ingester
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from trustgraph.db.base import Base


class Review(Base):
    """A rated review of a subject, authored by a Nostr identity."""
    __tablename__ = "reviews"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    event_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    subject_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    author_pubkey: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    event_created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    indexed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    replies: Mapped[list["ReviewReply"]] = relationship(
        "ReviewReply", back_populates="review",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="ReviewReply.event_created_at",
    )


class ReviewReply(Base):
    """Reply to a review (possibly by the venue owner)."""
    __tablename__ = "review_replies"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    event_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    review_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("reviews.id", ondelete="CASCADE"), nullable=False,
    )
    author_pubkey: Mapped[str] = mapped_column(String(64), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_owner_reply: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    event_created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    indexed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    review: Mapped["Review"] = relationship("Review", back_populates="replies")
