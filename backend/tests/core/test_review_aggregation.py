"""Review Aggregation — verifies annotation, ordering and both averages.

Tests:
    - Trusted 5-star vs unknown 1-star: weighted 4.2, simple 3.0
    - Unknown authors get the default score and the "new" level
    - Trust order breaks ties by recency; date order ignores trust
    - Unrated reviews are listed but never averaged
    - Inputs are not mutated
"""

from datetime import datetime, timezone

import pytest

from trustgraph.core.domain_types import ReviewSort
from trustgraph.core.review_aggregation import (
    aggregate_reviews, annotate_reviews, simple_average, sort_reviews, weighted_average,
)

TRUSTED = "ab" * 32
STRANGER = "cd" * 32


def _review(author, rating, day, **extra):
    return {
        "author_pubkey": author,
        "rating": rating,
        "event_created_at": datetime(2026, 1, day, tzinfo=timezone.utc),
        "replies": [],
        **extra,
    }


def test_trusted_review_dominates_weighted_average():
    reviews = [_review(TRUSTED, 5, 1), _review(STRANGER, 1, 2)]
    result = aggregate_reviews(reviews, {TRUSTED: 0.08}, default_score=0.02)

    assert result["weighted_average_rating"] == pytest.approx(4.2)
    assert result["simple_average_rating"] == pytest.approx(3.0)
    assert result["total_reviews"] == 2
    assert [r["author_pubkey"] for r in result["reviews"]] == [TRUSTED, STRANGER]


def test_unknown_author_gets_default_and_new_level():
    [annotated] = annotate_reviews([_review(STRANGER, 4, 1)], {}, default_score=0.02)
    assert annotated["trust_score"] == 0.02
    assert annotated["trust_level"] == "new"


def test_author_lookup_is_case_insensitive():
    [annotated] = annotate_reviews([_review(TRUSTED.upper(), 4, 1)], {TRUSTED: 1.0})
    assert annotated["trust_level"] == "seeder"


def test_equal_trust_breaks_ties_by_recency():
    reviews = [_review(STRANGER, 3, 1, event_id="old"), _review(STRANGER, 3, 9, event_id="new")]
    ordered = sort_reviews(annotate_reviews(reviews, {}))
    assert [r["event_id"] for r in ordered] == ["new", "old"]


def test_date_sort_ignores_trust():
    reviews = [_review(TRUSTED, 5, 1), _review(STRANGER, 1, 2)]
    ordered = sort_reviews(annotate_reviews(reviews, {TRUSTED: 1.0}), ReviewSort.DATE)
    assert [r["author_pubkey"] for r in ordered] == [STRANGER, TRUSTED]


def test_unrated_reviews_are_listed_but_not_averaged():
    reviews = annotate_reviews([_review(TRUSTED, None, 1), _review(STRANGER, 4, 2)], {})
    assert simple_average(reviews) == 4.0
    assert weighted_average(reviews) == pytest.approx(4.0)


def test_averages_are_none_without_ratings():
    result = aggregate_reviews([_review(TRUSTED, None, 1)], {})
    assert result["weighted_average_rating"] is None
    assert result["simple_average_rating"] is None
    assert result["total_reviews"] == 1


def test_zero_total_weight_gives_no_weighted_average():
    reviews = annotate_reviews([_review(STRANGER, 5, 1)], {}, default_score=0.0)
    assert weighted_average(reviews) is None
    assert simple_average(reviews) == 5.0


def test_empty_subject():
    assert aggregate_reviews([], {}) == {
        "reviews": [],
        "weighted_average_rating": None,
        "simple_average_rating": None,
        "total_reviews": 0,
    }


def test_inputs_are_not_mutated():
    review = _review(TRUSTED, 5, 1)
    aggregate_reviews([review], {TRUSTED: 0.5})
    assert "trust_score" not in review
