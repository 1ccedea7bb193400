"""Seeder Routes — admin CRUD for community seeders.

Invariants:
    - Path pubkeys accept hex or npub; malformed ones answer 400 INVALID_PUBKEY
    - Duplicate create answers 409, unknown pubkey on update/delete answers 404
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from trustgraph.api.dependencies import get_container
from trustgraph.core.errors import ErrorContext, ResourceNotFoundError
from trustgraph.schemas.seeder import (
    SeederCreate, SeederListResponse, SeederResponse, SeederUpdate,
)
from trustgraph.services.container import TrustGraphContainer

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/seeders", tags=["seeders"])


@router.get("/", response_model=SeederListResponse)
async def list_seeders(
    region: str | None = Query(None),
    container: TrustGraphContainer = Depends(get_container),
):
    seeders = await container.seeders.list_seeders(region)
    return SeederListResponse(
        seeders=[SeederResponse.model_validate(s) for s in seeders],
        total=await container.seeders.count_seeders(),
        regions=await container.seeders.list_seeder_regions(),
    )


@router.post("/", response_model=SeederResponse, status_code=status.HTTP_201_CREATED)
async def create_seeder(
    body: SeederCreate, container: TrustGraphContainer = Depends(get_container),
):
    return await container.seeders.create_seeder(
        body.pubkey, body.region, label=body.label, added_by=body.added_by,
    )


@router.get("/{pubkey}", response_model=SeederResponse)
async def get_seeder(
    pubkey: str, container: TrustGraphContainer = Depends(get_container),
):
    seeder = await container.seeders.get_seeder(pubkey)
    if seeder is None:
        raise ResourceNotFoundError("Seeder", pubkey, ErrorContext(pubkey=pubkey))
    return seeder


@router.patch("/{pubkey}", response_model=SeederResponse)
async def update_seeder(
    pubkey: str,
    body: SeederUpdate,
    container: TrustGraphContainer = Depends(get_container),
):
    return await container.seeders.update_seeder(
        pubkey, region=body.region, label=body.label,
    )


@router.delete("/{pubkey}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_seeder(
    pubkey: str, container: TrustGraphContainer = Depends(get_container),
):
    await container.seeders.delete_seeder(pubkey)
