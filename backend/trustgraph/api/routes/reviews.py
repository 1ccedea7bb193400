"""Review Routes — trust-weighted reviews of one subject."""

from fastapi import APIRouter, Depends, Query

from trustgraph.api.dependencies import get_container
from trustgraph.core.domain_types import ReviewSort
from trustgraph.schemas.review import ReviewsWithTrustResponse
from trustgraph.services.container import TrustGraphContainer

router = APIRouter(prefix="/api/v1/reviews", tags=["reviews"])


@router.get("/{subject_id:path}", response_model=ReviewsWithTrustResponse)
async def get_reviews_with_trust(
    subject_id: str,
    sort_by: ReviewSort = Query(ReviewSort.TRUST),
    container: TrustGraphContainer = Depends(get_container),
):
    """subject_id is an OSM reference such as node/123456 (slash allowed)."""
    result = await container.reviews.get_reviews_with_trust(subject_id, sort_by)
    return ReviewsWithTrustResponse(subject_id=subject_id, **result)
