"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched for code that opens sessions itself (watcher, readiness)
    - Every client test starts with a fresh presence hub and expiry coordinator

Design Decisions:
    - SQLite in-memory with StaticPool: every session shares one connection, so
      separately opened sessions see each other's commits
    - Anthropic client injected through app.state: routes never build a real one
"""

import pytest
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from kontekst.db.base import Base
import kontekst.models  # noqa: F401
from kontekst.infrastructure.database import get_db, DatabaseSessionManager
import kontekst.infrastructure.database as db_module
from kontekst.main import app
from kontekst.models.content_vote import ContentVote
from kontekst.models.content_vote_ballot import ContentVoteBallot
from kontekst.models.profile import Profile
from kontekst.services.expiry_coordinator import ExpiryCoordinator
from kontekst.services.presence import PresenceHub

from tests.services.mock_anthropic import MockAnthropicClient, article_json


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def fake_manager(test_engine, test_session_factory):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
def mock_anthropic():
    return MockAnthropicClient([article_json()])


@pytest.fixture
async def client(test_session_factory, fake_manager, mock_anthropic):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    db_module.db_manager = fake_manager

    app.state.presence_hub = PresenceHub()
    app.state.expiry_coordinator = ExpiryCoordinator(settle_delay_seconds=0)
    app.state.anthropic_client = mock_anthropic

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
    app.state.anthropic_client = None


# ─── Seed helpers ────────────────────────────────────────────────

@pytest.fixture
def seed_vote(test_db):
    """Factory: insert a content vote with ballots for the given option indexes."""
    async def _seed(
        options=("Yes", "No"),
        ballots=(),
        ends_in=timedelta(hours=48),
        is_active=True,
        created_ago=timedelta(hours=1),
    ):
        now = datetime.now(timezone.utc)
        vote = ContentVote(
            title="Which topic next?",
            options=[{"text": o} for o in options],
            is_active=is_active,
            ends_at=None if ends_in is None else now + ends_in,
            created_at=now - created_ago,
        )
        test_db.add(vote)
        await test_db.flush()
        for index in ballots:
            test_db.add(ContentVoteBallot(
                vote_id=vote.id, user_id=uuid4(), option_index=index,
            ))
        await test_db.commit()
        return vote
    return _seed


@pytest.fixture
def seed_profile(test_db):
    async def _seed(is_premium=True, **fields):
        profile = Profile(user_id=uuid4(), is_premium=is_premium, **fields)
        test_db.add(profile)
        await test_db.commit()
        return profile
    return _seed
