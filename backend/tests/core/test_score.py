"""Trust Score — verifies the pure score mapping and trust-level classification.

Tests:
    - Seeders score 1.0 regardless of counters
    - Weighted sum per depth, capped at max_score
    - Monotone in every counter
    - Custom weights flow through
"""

import pytest

from trustgraph.core.domain_types import TrustLevel
from trustgraph.core.score import (
    DEFAULT_TRUST_SCORE, ScoreWeights, calculate_score, classify_trust,
)


def test_seeder_scores_one_whatever_the_counters():
    assert calculate_score(True, 0, 0, 0) == 1.0
    assert calculate_score(True, 40, 40, 40) == 1.0


def test_single_backer_per_depth():
    assert calculate_score(False, 1, 0, 0) == pytest.approx(0.15)
    assert calculate_score(False, 0, 1, 0) == pytest.approx(0.02)
    assert calculate_score(False, 0, 0, 1) == pytest.approx(0.005)


def test_mixed_counters_add_up():
    assert calculate_score(False, 2, 3, 4) == pytest.approx(0.30 + 0.06 + 0.02)


def test_score_is_capped_at_max():
    assert calculate_score(False, 7, 0, 0) == 1.0
    assert calculate_score(False, 0, 200, 0) == 1.0


def test_no_backers_scores_zero():
    assert calculate_score(False, 0, 0, 0) == 0.0


@pytest.mark.parametrize("bump", [(1, 0, 0), (0, 1, 0), (0, 0, 1)])
def test_raising_a_counter_never_lowers_the_score(bump):
    base = (2, 5, 11)
    raised = tuple(b + d for b, d in zip(base, bump))
    assert calculate_score(False, *raised) >= calculate_score(False, *base)


def test_custom_weights_are_used():
    weights = ScoreWeights(per_depth0_follower=0.5, max_score=0.8)
    assert calculate_score(False, 1, 0, 0, weights) == pytest.approx(0.5)
    assert calculate_score(False, 3, 0, 0, weights) == pytest.approx(0.8)


def test_default_score_for_unknown_identities():
    assert DEFAULT_TRUST_SCORE == pytest.approx(0.02)


@pytest.mark.parametrize("score,level", [
    (1.0, TrustLevel.SEEDER),
    (0.4, TrustLevel.TRUSTED),
    (0.75, TrustLevel.TRUSTED),
    (0.1, TrustLevel.KNOWN),
    (0.39, TrustLevel.KNOWN),
    (0.099, TrustLevel.NEW),
    (0.0, TrustLevel.NEW),
])
def test_classify_trust_thresholds(score, level):
    assert classify_trust(score) == level
