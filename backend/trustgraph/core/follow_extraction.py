"""Follow Extraction — pick the freshest kind-3 event and pull followee pubkeys out of it.

Invariants:
    - Only ["p", <64 hex>] tags count as follows; everything else is dropped silently
    - Followees are lower-cased and de-duplicated, first occurrence order preserved
    - newer_event keeps the event with the greatest created_at (ties keep the current one)
    - Events without an integer created_at or a list of tags never win

Design Decisions:
    - Works on raw NIP-01 dicts: the transport hands over JSON as received
"""

from trustgraph.core.domain_types import FOLLOW_LIST_KIND, Pubkey
from trustgraph.core.pubkeys import is_hex_pubkey


def follow_list_filter(pubkey: str) -> dict:
    """NIP-01 REQ filter for the latest follow list of one author."""
    return {"kinds": [FOLLOW_LIST_KIND], "authors": [pubkey], "limit": 1}


def is_follow_list_event(event: object) -> bool:
    if not isinstance(event, dict):
        return False
    created_at = event.get("created_at")
    return (
        isinstance(created_at, int)
        and not isinstance(created_at, bool)
        and isinstance(event.get("tags"), list)
        and event.get("kind", FOLLOW_LIST_KIND) == FOLLOW_LIST_KIND
    )


def newer_event(current: dict | None, candidate: object) -> dict | None:
    """Return whichever of current/candidate is the most recent valid event."""
    if not is_follow_list_event(candidate):
        return current
    if current is None or candidate["created_at"] > current["created_at"]:
        return candidate
    return current


def extract_follows(event: dict | None) -> list[Pubkey]:
    """Followed pubkeys from a kind-3 event's p-tags."""
    if not event:
        return []

    seen: dict[str, None] = {}
    for tag in event.get("tags") or []:
        if not isinstance(tag, list) or len(tag) < 2:
            continue
        name, value = tag[0], tag[1]
        if name == "p" and isinstance(value, str) and is_hex_pubkey(value):
            seen.setdefault(value.lower())
    return [Pubkey(p) for p in seen]
