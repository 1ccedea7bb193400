"""Pubkey Normalization — verifies hex/npub handling.

Tests:
    - Hex is lower-cased, surrounding whitespace stripped
    - npub decodes to the NIP-19 reference vector; encode is its inverse
    - Bad checksum, wrong prefix, wrong length, URIs and junk are rejected with None
    - lookup_key never rejects
"""

import pytest

from trustgraph.core.pubkeys import (
    decode_npub, encode_npub, is_hex_pubkey, lookup_key, normalize_pubkey,
)

NPUB = "npub180cvv07tjdrrgpa0j7j7tmnyl2yr6yr7l8j4s3evf6u64th6gkwsyjh6w6"
HEX = "3bf0c63fcb93463407af97a5e5ee64fa883d107ef9e558472c4eb9aaaefa459d"


def test_hex_is_lower_cased_and_stripped():
    assert normalize_pubkey(f"  {HEX.upper()} ") == HEX


def test_npub_decodes_to_reference_hex():
    assert decode_npub(NPUB) == HEX
    assert normalize_pubkey(NPUB) == HEX


def test_upper_case_npub_is_accepted():
    assert normalize_pubkey(NPUB.upper()) == HEX


def test_encode_npub_matches_reference():
    assert encode_npub(HEX) == NPUB


def test_encode_npub_rejects_non_hex():
    with pytest.raises(ValueError):
        encode_npub("not-a-key")


def test_bad_checksum_is_rejected():
    broken = NPUB[:-1] + ("q" if NPUB[-1] != "q" else "p")
    assert normalize_pubkey(broken) is None


def test_wrong_prefix_is_rejected():
    assert decode_npub("nsec" + NPUB[4:]) is None


@pytest.mark.parametrize("value", ["", "abc", HEX[:-1], HEX + "0", "g" * 64, "npub1"])
def test_junk_normalizes_to_none(value):
    assert normalize_pubkey(value) is None


def test_is_hex_pubkey_accepts_either_case():
    assert is_hex_pubkey(HEX)
    assert is_hex_pubkey(HEX.upper())
    assert not is_hex_pubkey(HEX[:10])


def test_lookup_key_normalizes_valid_and_passes_junk_through():
    assert lookup_key(NPUB) == HEX
    assert lookup_key(" Some-Junk ") == "some-junk"


def test_nostr_uri_is_not_an_identity():
    assert normalize_pubkey("nostr:" + NPUB) is None
