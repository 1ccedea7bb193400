"""Trust Schemas — score lookup request/response models."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class TrustScoreResponse(BaseModel):
    pubkey: str
    score: float
    trust_level: Literal["seeder", "trusted", "known", "new"]


class TrustScoresRequest(BaseModel):
    """Batch lookup. Identities may be hex or npub; unknown ones get the default."""
    pubkeys: list[str] = Field(min_length=1, max_length=1000)

    @field_validator("pubkeys")
    @classmethod
    def strip_pubkeys(cls, v: list[str]) -> list[str]:
        stripped = [pk.strip() for pk in v]
        if not all(stripped):
            raise ValueError("pubkeys cannot contain empty values")
        return stripped


class TrustScoresResponse(BaseModel):
    scores: dict[str, float]
