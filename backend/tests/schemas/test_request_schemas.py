"""Request schemas — batch trust lookups and seeder admin bodies.

Invariants:
    - Batch lookup takes 1-1000 identities, stripped, none empty
    - Seeder region is stripped and must not be blank
    - Pubkey shape is left to the services (INVALID_PUBKEY envelope)
"""

import pytest
from pydantic import ValidationError

from trustgraph.schemas.seeder import SeederCreate, SeederUpdate
from trustgraph.schemas.trust import TrustScoresRequest


# --- TrustScoresRequest -------------------------------------------------------

def test_batch_pubkeys_are_stripped():
    req = TrustScoresRequest(pubkeys=["  abc ", "npub1xyz"])
    assert req.pubkeys == ["abc", "npub1xyz"]


def test_batch_rejects_blank_entries():
    with pytest.raises(ValidationError):
        TrustScoresRequest(pubkeys=["abc", "   "])


def test_batch_size_limits():
    with pytest.raises(ValidationError):
        TrustScoresRequest(pubkeys=[])
    with pytest.raises(ValidationError):
        TrustScoresRequest(pubkeys=["a"] * 1001)


# --- SeederCreate / SeederUpdate ----------------------------------------------

def test_seeder_region_is_stripped():
    body = SeederCreate(pubkey="not-checked-here", region="  porto ")
    assert body.region == "porto"
    assert body.label is None


def test_seeder_region_cannot_be_blank():
    with pytest.raises(ValidationError):
        SeederCreate(pubkey="a" * 64, region="   ")


def test_seeder_update_is_partial():
    body = SeederUpdate(label="Café owner")
    assert body.region is None
    assert body.model_dump(exclude_unset=True) == {"label": "Café owner"}
