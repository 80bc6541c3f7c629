import json
from datetime import timedelta
from types import SimpleNamespace
from typing import Any, AsyncGenerator
from unittest.mock import AsyncMock, Mock

import pydantic_core
import pytest
from httpx import AsyncClient, ASGITransport
from pydantic import TypeAdapter, ValidationError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.database import Base
from app.api.deps import get_db, get_debate_generator  # Import from where routes actually use it
from app.caching import get_cache
from app.models import User
from app.schemas.lineup import TeamRoster
from app.schemas.provider import FixturesResponse, LeaguesResponse, NewsSearchResponse, StandingsResponse
from app.security.jwt import create_access_token
from app.services.debate_generator import DebateGenerator
from app.services.football_client import FootballClient, get_football_client
from app.services.news_client import NewsClient, get_news_client
from app.services.social_client import SocialClient, get_social_client


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

SAMPLE_DEBATE = {
    "headline": "Is Arsenal's midfield good enough to win the title?",
    "description": "Arsenal host Chelsea with their engine room under scrutiny.",
    "cards": [
        {"stance": "agree", "title": "Rice runs the game", "description": "He has been dominant."},
        {"stance": "disagree", "title": "Too thin in depth", "description": "One injury away from trouble."},
        {"stance": "wildcard", "title": "Play a back three", "description": "Free the full-backs."},
    ],
}


class InMemoryCache:
    """CacheGateway test double that keeps JSON payloads and the TTL of each write."""

    def __init__(self):
        self.store: dict[str, bytes] = {}
        self.ttls: dict[str, timedelta] = {}

    async def exists(self, key: str) -> bool:
        return key in self.store

    async def get(self, key: str, shape):
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return TypeAdapter(shape).validate_json(raw)
        except ValidationError:
            return None

    async def set(self, key: str, value: Any, ttl: timedelta) -> bool:
        self.store[key] = pydantic_core.to_json(value, by_alias=True)
        self.ttls[key] = ttl
        return True

    async def delete(self, key: str) -> bool:
        self.store.pop(key, None)
        self.ttls.pop(key, None)
        return True

    async def invalidate_pattern(self, pattern: str) -> bool:
        prefix = pattern.rstrip("*")
        for key in [k for k in self.store if k.startswith(prefix)]:
            await self.delete(key)
        return True

    async def health_check(self) -> bool:
        return True

    async def get_stats(self) -> dict[str, Any]:
        return {"available": True, "keys": len(self.store)}


def make_completion(payload: Any) -> SimpleNamespace:
    """Shape of an OpenAI chat completion as read by DebateGenerator."""
    content = payload if isinstance(payload, str) else json.dumps(payload)
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


# Note: Using pytest-asyncio's built-in event_loop fixture (asyncio_mode = auto)


@pytest.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


# --- Provider doubles ---

@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def football_client():
    client = Mock(spec=FootballClient)
    client.is_configured = True
    client.fetch_fixtures = AsyncMock(return_value=FixturesResponse())
    client.fetch_match_info = AsyncMock(return_value=None)
    client.fetch_lineup = AsyncMock(return_value=[])
    client.fetch_squad = AsyncMock(side_effect=lambda team_id: TeamRoster(team_id=team_id))
    client.fetch_statistics = AsyncMock(return_value=None)
    client.fetch_leagues = AsyncMock(return_value=LeaguesResponse())
    client.fetch_standings = AsyncMock(return_value=StandingsResponse())
    client.fetch_team_standings = AsyncMock(return_value=StandingsResponse())
    return client


@pytest.fixture
def news_client():
    client = Mock(spec=NewsClient)
    client.is_configured = False
    client.default_language = "en-US"
    client.search = AsyncMock(return_value=NewsSearchResponse())
    return client


@pytest.fixture
def social_client():
    client = Mock(spec=SocialClient)
    client.is_configured = False
    client.search_recent_posts = AsyncMock(return_value=[])
    return client


@pytest.fixture
def openai_client():
    client = Mock()
    client.chat.completions.create = AsyncMock(return_value=make_completion(SAMPLE_DEBATE))
    return client


@pytest.fixture
def generator(cache, openai_client) -> DebateGenerator:
    return DebateGenerator(cache, client=openai_client)


@pytest.fixture(scope="function")
async def client(
    test_session, cache, football_client, news_client, social_client, generator
) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with overridden database, cache and provider dependencies."""

    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_football_client] = lambda: football_client
    app.dependency_overrides[get_news_client] = lambda: news_client
    app.dependency_overrides[get_social_client] = lambda: social_client
    app.dependency_overrides[get_debate_generator] = lambda: generator

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# --- Data Fixtures ---

@pytest.fixture
async def sample_user(test_session) -> User:
    """Create a sample user."""
    user = User(firstname="Jamie", lastname="Fan", email="jamie@example.com")
    test_session.add(user)
    await test_session.commit()
    await test_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(sample_user) -> dict[str, str]:
    token = create_access_token(user_id=sample_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sample_debate_payload() -> dict:
    return json.loads(json.dumps(SAMPLE_DEBATE))


@pytest.fixture
def completion():
    return make_completion
