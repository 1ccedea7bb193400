"""Review Aggregation — trust annotation, ordering and averages over review dicts.

Invariants:
    - Input review dicts are never mutated (annotated copies are returned)
    - Authors missing from the score map get the default score
    - Trust order: score desc, then event_created_at desc
    - Only reviews with a numeric rating enter either average
    - weighted_average is None when there is no rated review or the weights sum to 0
    - Replies ride along untouched

Design Decisions:
    - Pure functions over plain dicts: the service loads ORM rows, converts once, and
      everything after that is testable without a database
"""

from collections.abc import Iterable, Mapping

from trustgraph.core.domain_types import ReviewSort
from trustgraph.core.pubkeys import lookup_key
from trustgraph.core.score import DEFAULT_TRUST_SCORE, classify_trust


def annotate_reviews(
    reviews: Iterable[dict],
    scores: Mapping[str, float],
    default_score: float = DEFAULT_TRUST_SCORE,
) -> list[dict]:
    """Attach trust_score and trust_level to copies of each review."""
    annotated = []
    for review in reviews:
        score = scores.get(lookup_key(review["author_pubkey"]), default_score)
        annotated.append({
            **review,
            "trust_score": score,
            "trust_level": classify_trust(score).value,
        })
    return annotated


def sort_reviews(
    reviews: list[dict], sort_by: ReviewSort = ReviewSort.TRUST,
) -> list[dict]:
    """Order annotated reviews. Stable for equal keys."""
    by_date = sorted(reviews, key=lambda r: r["event_created_at"], reverse=True)
    if sort_by == ReviewSort.DATE:
        return by_date
    return sorted(by_date, key=lambda r: r["trust_score"], reverse=True)


def _rated(reviews: Iterable[dict]) -> list[dict]:
    return [
        r for r in reviews
        if isinstance(r.get("rating"), (int, float))
        and not isinstance(r.get("rating"), bool)
    ]


def simple_average(reviews: Iterable[dict]) -> float | None:
    rated = _rated(reviews)
    if not rated:
        return None
    return sum(r["rating"] for r in rated) / len(rated)


def weighted_average(reviews: Iterable[dict]) -> float | None:
    """Σ(rating·trust) / Σ(trust) over rated reviews."""
    rated = _rated(reviews)
    total_weight = sum(r["trust_score"] for r in rated)
    if not rated or total_weight <= 0:
        return None
    return sum(r["rating"] * r["trust_score"] for r in rated) / total_weight


def aggregate_reviews(
    reviews: list[dict],
    scores: Mapping[str, float],
    default_score: float = DEFAULT_TRUST_SCORE,
    sort_by: ReviewSort = ReviewSort.TRUST,
) -> dict:
    """Annotate, sort and average in one pass. Pure, no IO."""
    annotated = sort_reviews(
        annotate_reviews(reviews, scores, default_score), sort_by,
    )
    return {
        "reviews": annotated,
        "weighted_average_rating": weighted_average(annotated),
        "simple_average_rating": simple_average(annotated),
        "total_reviews": len(annotated),
    }
