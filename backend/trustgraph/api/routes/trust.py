"""Trust Routes — score lookups for single identities and batches.

Invariants:
    - Never 404: identities outside the graph get the default score
"""

from fastapi import APIRouter, Depends

from trustgraph.api.dependencies import get_container
from trustgraph.core.score import classify_trust
from trustgraph.schemas.trust import (
    TrustScoreResponse, TrustScoresRequest, TrustScoresResponse,
)
from trustgraph.services.container import TrustGraphContainer

router = APIRouter(prefix="/api/v1/trust", tags=["trust"])


@router.get("/{pubkey}", response_model=TrustScoreResponse)
async def get_trust_score(
    pubkey: str, container: TrustGraphContainer = Depends(get_container),
):
    score = await container.scores.get_trust_score(pubkey)
    return TrustScoreResponse(
        pubkey=pubkey, score=score, trust_level=classify_trust(score).value,
    )


@router.post("/batch", response_model=TrustScoresResponse)
async def get_trust_scores(
    body: TrustScoresRequest,
    container: TrustGraphContainer = Depends(get_container),
):
    return TrustScoresResponse(
        scores=await container.scores.get_trust_scores(body.pubkeys),
    )
