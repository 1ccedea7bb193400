"""Graph Analytics — bucketing of scores and seeder-follower counts for the admin view.

Invariants:
    - Every value lands in exactly one bucket; bucket lists are returned in display order
    - Empty buckets are reported with count 0 (fixed shape for charts)
"""

from collections import Counter
from collections.abc import Callable, Iterable

SCORE_BUCKETS = (
    (0.8, "0.8-1.0"),
    (0.6, "0.6-0.8"),
    (0.4, "0.4-0.6"),
    (0.2, "0.2-0.4"),
    (0.1, "0.1-0.2"),
    (0.05, "0.05-0.1"),
)
SCORE_FLOOR_BUCKET = "0-0.05"

SEEDER_FOLLOWER_BUCKETS = (
    (5, "5+ seeders"),
    (3, "3-4 seeders"),
    (2, "2 seeders"),
    (1, "1 seeder"),
)
SEEDER_FOLLOWER_FLOOR_BUCKET = "0 seeders"


def score_bucket(score: float) -> str:
    for lower, label in SCORE_BUCKETS:
        if score >= lower:
            return label
    return SCORE_FLOOR_BUCKET


def seeder_follower_bucket(count: int) -> str:
    for lower, label in SEEDER_FOLLOWER_BUCKETS:
        if count >= lower:
            return label
    return SEEDER_FOLLOWER_FLOOR_BUCKET


def _distribution(
    values: Iterable, bucketer: Callable, order: list[str],
) -> list[dict]:
    counts = Counter(bucketer(v) for v in values)
    return [{"bucket": label, "count": counts.get(label, 0)} for label in order]


def score_distribution(scores: Iterable[float]) -> list[dict]:
    order = [label for _, label in SCORE_BUCKETS] + [SCORE_FLOOR_BUCKET]
    return _distribution(scores, score_bucket, order)


def seeder_follower_distribution(counts: Iterable[int]) -> list[dict]:
    order = [label for _, label in SEEDER_FOLLOWER_BUCKETS] + [
        SEEDER_FOLLOWER_FLOOR_BUCKET,
    ]
    return _distribution(counts, seeder_follower_bucket, order)
