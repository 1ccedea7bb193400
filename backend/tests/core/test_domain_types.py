"""Domain Types — verifies enum values that are persisted or sent over the wire."""

from trustgraph.core.domain_types import (
    FOLLOW_LIST_KIND, PUBKEY_HEX_LENGTH, BuildStatus, Pubkey, ReviewSort, TrustLevel,
)


def test_pubkey_wraps_str():
    assert Pubkey("ab" * 32) == "ab" * 32


def test_nostr_constants():
    assert FOLLOW_LIST_KIND == 3
    assert PUBKEY_HEX_LENGTH == 64


def test_build_status_values_match_stored_strings():
    assert [s.value for s in BuildStatus] == ["RUNNING", "COMPLETED", "FAILED"]


def test_trust_levels_serialize_lower_case():
    assert {t.value for t in TrustLevel} == {"seeder", "trusted", "known", "new"}


def test_review_sort_accepts_query_strings():
    assert ReviewSort("trust") is ReviewSort.TRUST
    assert ReviewSort("date") is ReviewSort.DATE
