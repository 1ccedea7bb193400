"""Review Schemas — trust-annotated review list for one subject."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel


class ReplyResponse(BaseModel):
    id: UUID
    event_id: str
    author_pubkey: str
    content: str
    is_owner_reply: bool
    event_created_at: datetime


class ReviewWithTrust(BaseModel):
    id: UUID
    event_id: str
    subject_id: str
    author_pubkey: str
    rating: int | None = None
    content: str | None = None
    event_created_at: datetime
    trust_score: float
    trust_level: Literal["seeder", "trusted", "known", "new"]
    replies: list[ReplyResponse] = []


class ReviewsWithTrustResponse(BaseModel):
    subject_id: str
    reviews: list[ReviewWithTrust]
    weighted_average_rating: float | None = None
    simple_average_rating: float | None = None
    total_reviews: int
