"""Trust Score — pure mapping from a node's reverse-edge counts to a bounded score.

Invariants:
    - Seeders always score weights.is_seeder (1.0), whatever their counters say
    - Non-seeder score = min(max_score, d0*w0 + d1*w1 + d2*w2), within [0, max_score]
    - Raising any single counter never lowers the score (weights are non-negative)
    - Identities missing from the graph get DEFAULT_TRUST_SCORE, never a computed value

Design Decisions:
    - Weights in a frozen dataclass: recalculation after tuning only needs new weights,
      no crawl (stored counters are the single input)
    - Trust levels mirror the review badge thresholds (seeder / trusted / known / new)
"""

from dataclasses import dataclass

from trustgraph.core.domain_types import TrustLevel, TrustScore

DEFAULT_TRUST_SCORE = TrustScore(0.02)

_TRUSTED_THRESHOLD = 0.4
_KNOWN_THRESHOLD = 0.1


@dataclass(frozen=True)
class ScoreWeights:
    """Tunable weights for calculate_score."""
    is_seeder: float = 1.0
    per_depth0_follower: float = 0.15
    per_depth1_follower: float = 0.02
    per_depth2_follower: float = 0.005
    max_score: float = 1.0


DEFAULT_WEIGHTS = ScoreWeights()


def calculate_score(
    is_seeder: bool,
    followed_by_depth0: int,
    followed_by_depth1: int,
    followed_by_depth2: int,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> TrustScore:
    """Score from seeder flag and reverse-edge counts. Pure, no IO."""
    if is_seeder:
        return TrustScore(weights.is_seeder)

    score = (
        followed_by_depth0 * weights.per_depth0_follower
        + followed_by_depth1 * weights.per_depth1_follower
        + followed_by_depth2 * weights.per_depth2_follower
    )
    return TrustScore(min(max(score, 0.0), weights.max_score))


def classify_trust(score: float) -> TrustLevel:
    if score >= 1.0:
        return TrustLevel.SEEDER
    if score >= _TRUSTED_THRESHOLD:
        return TrustLevel.TRUSTED
    if score >= _KNOWN_THRESHOLD:
        return TrustLevel.KNOWN
    return TrustLevel.NEW
