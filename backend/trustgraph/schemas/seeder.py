"""Seeder Schemas — admin CRUD contracts for community seeders.

Invariants:
    - region 1-100 chars, stripped, non-empty
    - pubkey shape is checked by the service (npub or hex), not here, so the
      error envelope is INVALID_PUBKEY rather than a generic validation error
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SeederCreate(BaseModel):
    pubkey: str = Field(min_length=1, max_length=100)
    region: str = Field(min_length=1, max_length=100)
    label: str | None = Field(None, max_length=200)
    added_by: str | None = Field(None, max_length=100)

    @field_validator("region")
    @classmethod
    def strip_region(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("region cannot be empty or whitespace")
        return v


class SeederUpdate(BaseModel):
    region: str | None = Field(None, min_length=1, max_length=100)
    label: str | None = Field(None, max_length=200)


class SeederResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    pubkey: str
    region: str
    label: str | None = None
    added_by: str | None = None
    created_at: datetime
    updated_at: datetime


class SeederListResponse(BaseModel):
    seeders: list[SeederResponse]
    total: int
    regions: list[str]
