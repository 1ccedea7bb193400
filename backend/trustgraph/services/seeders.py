"""Seeder Service — admin CRUD for the curated root identities.

Invariants:
    - Stored pubkeys are always lower-case hex; npub input is decoded first
    - Invalid identity input raises InvalidPubkeyError before touching the database
    - Duplicate pubkey raises SeederExistsError (also when a concurrent insert wins)
    - Changes affect the graph only on the next build
"""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError

from trustgraph.core.errors import (
    ErrorContext, InvalidPubkeyError, ResourceNotFoundError, SeederExistsError,
)
from trustgraph.core.pubkeys import normalize_pubkey
from trustgraph.infrastructure.database import DatabaseSessionManager
from trustgraph.models.seeder import CommunitySeeder

logger = logging.getLogger(__name__)


def require_pubkey(value: str) -> str:
    """Normalize npub/hex or raise InvalidPubkeyError."""
    pubkey = normalize_pubkey(value)
    if pubkey is None:
        raise InvalidPubkeyError(value)
    return pubkey


class SeederService:

    def __init__(self, db: DatabaseSessionManager):
        self.db = db

    async def get_seeder(self, pubkey: str) -> CommunitySeeder | None:
        async with self.db.session() as db:
            result = await db.execute(
                select(CommunitySeeder)
                .where(CommunitySeeder.pubkey == require_pubkey(pubkey))
            )
            return result.scalar_one_or_none()

    async def list_seeders(self, region: str | None = None) -> list[CommunitySeeder]:
        query = select(CommunitySeeder).order_by(
            CommunitySeeder.region, CommunitySeeder.created_at,
        )
        if region is not None:
            query = query.where(CommunitySeeder.region == region)
        async with self.db.session() as db:
            result = await db.execute(query)
            return list(result.scalars())

    async def create_seeder(
        self,
        pubkey: str,
        region: str,
        label: str | None = None,
        added_by: str | None = None,
    ) -> CommunitySeeder:
        hex_pubkey = require_pubkey(pubkey)
        added_by_hex = normalize_pubkey(added_by) if added_by else None

        async with self.db.session() as db:
            existing = await db.scalar(
                select(CommunitySeeder.id).where(CommunitySeeder.pubkey == hex_pubkey)
            )
            if existing is not None:
                raise SeederExistsError(hex_pubkey)

            seeder = CommunitySeeder(
                pubkey=hex_pubkey, region=region, label=label, added_by=added_by_hex,
            )
            db.add(seeder)
            try:
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                raise SeederExistsError(hex_pubkey) from e

        logger.info(f"Seeder added in {region}", extra={"pubkey": hex_pubkey})
        return seeder

    async def update_seeder(
        self,
        pubkey: str,
        region: str | None = None,
        label: str | None = None,
    ) -> CommunitySeeder:
        hex_pubkey = require_pubkey(pubkey)
        async with self.db.session() as db:
            seeder = await db.scalar(
                select(CommunitySeeder).where(CommunitySeeder.pubkey == hex_pubkey)
            )
            if seeder is None:
                raise ResourceNotFoundError(
                    "Seeder", hex_pubkey, ErrorContext(pubkey=hex_pubkey),
                )
            if region is not None:
                seeder.region = region
            if label is not None:
                seeder.label = label
            await db.commit()
            await db.refresh(seeder)
            return seeder

    async def delete_seeder(self, pubkey: str) -> None:
        hex_pubkey = require_pubkey(pubkey)
        async with self.db.session() as db:
            result = await db.execute(
                delete(CommunitySeeder).where(CommunitySeeder.pubkey == hex_pubkey)
            )
            await db.commit()
        if result.rowcount == 0:
            raise ResourceNotFoundError(
                "Seeder", hex_pubkey, ErrorContext(pubkey=hex_pubkey),
            )
        logger.info("Seeder removed", extra={"pubkey": hex_pubkey})

    async def count_seeders(self) -> int:
        async with self.db.session() as db:
            return await db.scalar(select(func.count()).select_from(CommunitySeeder)) or 0

    async def list_seeder_regions(self) -> list[str]:
        async with self.db.session() as db:
            result = await db.execute(
                select(CommunitySeeder.region).distinct().order_by(CommunitySeeder.region)
            )
            return list(result.scalars())
