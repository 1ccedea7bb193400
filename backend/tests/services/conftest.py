"""Service test fixtures — in-memory DB, fake relays, wired container, FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Services are wired through build_container, same as production, with the
      DB manager and relay transport swapped for test doubles
    - get_container dependency overridden so routes see the test container

Design Decisions:
    - SQLite in-memory: fast, no external dependency; aiosqlite serves :memory:
      through a single shared connection, so sessions see each other's commits
    - ManualClock instead of sleeping: TTL and stale-lock tests move time explicitly
"""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

from trustgraph.api.dependencies import get_container
from trustgraph.config import Settings
from trustgraph.db.base import Base
from trustgraph.infrastructure.database import DatabaseSessionManager
from trustgraph.main import app
from trustgraph.services.container import build_container
import trustgraph.models  # noqa: F401

from tests.services.fake_relay import FakeRelayTransport, RELAY_A, RELAY_B


class ManualClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def db_manager(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
def fake_relay():
    return FakeRelayTransport()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        nostr_relays=[RELAY_A, RELAY_B],
        relay_timeout_seconds=0.5,
        fetch_batch_size=2,
        graph_insert_batch_size=3,
    )


@pytest.fixture
def container(settings, db_manager, fake_relay):
    return build_container(settings, db=db_manager, transport=fake_relay)


@pytest.fixture
async def client(container):
    """FastAPI test client with the container dependency overridden."""
    app.dependency_overrides[get_container] = lambda: container

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
