"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Pubkey is always 64 lower-case hex chars once it crosses core/pubkeys.normalize_pubkey
    - TrustScore is bounded 0.0–1.0
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: stored as-is in String columns and serialized to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

Pubkey = NewType("Pubkey", str)


# ─── Value Types ─────────────────────────────────────────────────

TrustScore = NewType("TrustScore", float)   # 0.0–1.0


# ─── Nostr Constants ─────────────────────────────────────────────

FOLLOW_LIST_KIND = 3    # NIP-02 contact list
PUBKEY_HEX_LENGTH = 64


# ─── Enums ───────────────────────────────────────────────────────

class BuildStatus(str, Enum):
    """Graph build lifecycle — maps to graph_build_logs.status."""
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class TrustLevel(str, Enum):
    """Coarse trust classification shown next to reviews."""
    SEEDER = "seeder"
    TRUSTED = "trusted"
    KNOWN = "known"
    NEW = "new"


class ReviewSort(str, Enum):
    """Ordering for trust-annotated review lists."""
    TRUST = "trust"
    DATE = "date"
