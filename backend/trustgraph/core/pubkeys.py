"""Pubkey Normalization — hex / npub (NIP-19) identities to canonical lower-case hex.

Invariants:
    - normalize_pubkey returns 64 lower-case hex chars or None, never raises
    - npub input must decode (checksum, prefix, 32-byte key) through nostr_sdk
    - lookup_key never rejects: unknown shapes are lower-cased and stripped so
      lookups for junk identities fall through to the default score

Design Decisions:
    - Only the npub prefix is routed to PublicKey.parse: nprofile / nostr: URIs
      are not accepted as seeder or lookup identities
"""

import re

from nostr_sdk import NostrSdkError, PublicKey

from trustgraph.core.domain_types import Pubkey

_HEX_PUBKEY = re.compile(r"^[0-9a-f]{64}$", re.IGNORECASE)
_NPUB_PREFIX = "npub1"


def is_hex_pubkey(value: str) -> bool:
    return bool(_HEX_PUBKEY.match(value))


def normalize_pubkey(value: str) -> Pubkey | None:
    """Normalize npub or hex to lower-case hex. None when the input is neither."""
    trimmed = value.strip()
    if trimmed.lower().startswith(_NPUB_PREFIX):
        return decode_npub(trimmed)
    if is_hex_pubkey(trimmed):
        return Pubkey(trimmed.lower())
    return None


def lookup_key(value: str) -> str:
    """Best-effort key for score lookups (never rejects)."""
    return normalize_pubkey(value) or value.strip().lower()


def decode_npub(npub: str) -> Pubkey | None:
    """Decode a NIP-19 npub into hex. None on bad prefix, checksum or key."""
    lower = npub.strip().lower()
    if not lower.startswith(_NPUB_PREFIX):
        return None
    try:
        return Pubkey(PublicKey.parse(lower).to_hex())
    except NostrSdkError:
        return None


def encode_npub(hex_pubkey: str) -> str:
    """Encode a 64-char hex pubkey as npub (for display)."""
    if not is_hex_pubkey(hex_pubkey):
        raise ValueError(f"not a hex pubkey: {hex_pubkey!r}")
    try:
        return PublicKey.parse(hex_pubkey.lower()).to_bech32()
    except NostrSdkError as e:
        raise ValueError(f"not a valid public key: {hex_pubkey!r}") from e
