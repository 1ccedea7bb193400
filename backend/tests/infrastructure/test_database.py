"""Database Session Manager — verifies rollback, error mapping and the readiness check.

Tests:
    - Unexpected constraint violations surface as DatabaseError and roll back
    - SQLite URLs build an engine without pool sizing
    - health_check answers True on a live engine
"""

import pytest
from sqlalchemy import select

from trustgraph.core.errors import DatabaseError
from trustgraph.db.base import Base
from trustgraph.infrastructure.database import DatabaseSessionManager
from trustgraph.models.seeder import CommunitySeeder
import trustgraph.models  # noqa: F401

PUBKEY = "ab" * 32


@pytest.fixture
async def manager():
    db = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db
    await db.dispose()


async def test_duplicate_insert_becomes_database_error(manager):
    async with manager.session() as db:
        db.add(CommunitySeeder(pubkey=PUBKEY, region="lisbon"))
        await db.commit()

    with pytest.raises(DatabaseError) as exc_info:
        async with manager.session() as db:
            db.add(CommunitySeeder(pubkey=PUBKEY, region="porto"))
            await db.commit()

    assert exc_info.value.operation == "commit"
    async with manager.session() as db:
        regions = (await db.execute(select(CommunitySeeder.region))).scalars().all()
    assert regions == ["lisbon"]


async def test_health_check_on_live_engine(manager):
    assert await manager.health_check()
