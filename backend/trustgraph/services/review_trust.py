"""Review Trust Service — loads a subject's reviews and weights them by author trust.

Invariants:
    - One score lookup for all authors of the subject (batch, not per review)
    - Replies are passed through as loaded, oldest first
    - A subject without reviews yields an empty list, both averages None, total 0
"""

import logging

from sqlalchemy import select

from trustgraph.core.domain_types import ReviewSort
from trustgraph.core.pubkeys import lookup_key
from trustgraph.core.review_aggregation import aggregate_reviews
from trustgraph.infrastructure.database import DatabaseSessionManager
from trustgraph.models.review import Review, ReviewReply
from trustgraph.services.trust_scores import TrustScoreService

logger = logging.getLogger(__name__)


def _reply_to_dict(reply: ReviewReply) -> dict:
    return {
        "id": reply.id,
        "event_id": reply.event_id,
        "author_pubkey": reply.author_pubkey,
        "content": reply.content,
        "is_owner_reply": reply.is_owner_reply,
        "event_created_at": reply.event_created_at,
    }


def _review_to_dict(review: Review) -> dict:
    return {
        "id": review.id,
        "event_id": review.event_id,
        "subject_id": review.subject_id,
        "author_pubkey": review.author_pubkey,
        "rating": review.rating,
        "content": review.content,
        "event_created_at": review.event_created_at,
        "replies": [_reply_to_dict(r) for r in review.replies],
    }


class ReviewTrustService:

    def __init__(self, db: DatabaseSessionManager, scores: TrustScoreService):
        self.db = db
        self.scores = scores

    async def get_reviews_with_trust(
        self, subject_id: str, sort_by: ReviewSort = ReviewSort.TRUST,
    ) -> dict:
        async with self.db.session() as db:
            result = await db.execute(
                select(Review).where(Review.subject_id == subject_id)
            )
            reviews = [_review_to_dict(r) for r in result.scalars()]

        scores = await self.scores.get_trust_scores(
            {r["author_pubkey"] for r in reviews},
        )
        # aggregation looks authors up by lookup_key, not by stored spelling
        by_key = {lookup_key(author): score for author, score in scores.items()}
        logger.debug(f"Weighted {len(reviews)} reviews for {subject_id}")
        return aggregate_reviews(
            reviews, by_key, self.scores.default_score, sort_by,
        )
