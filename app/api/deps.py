from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.caching import CacheGateway, get_cache
from app.database import AsyncSessionLocal
from app.models import User
from app.security.jwt import AccessTokenError, decode_access_token
from app.services.debate_data import DebateDataAggregator
from app.services.debate_generator import DebateGenerator
from app.services.debate_lifecycle import DebateLifecycleController
from app.services.debate_store import SqlDebateStore
from app.services.football_client import FootballClient, get_football_client
from app.services.lineup_service import LineupService
from app.services.match_data import MatchDataService
from app.services.news_client import NewsClient, get_news_client
from app.services.social_client import SocialClient, get_social_client

bearer_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


def _unauthorized(detail: str = "Unauthorized") -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Missing bearer token")

    try:
        payload = decode_access_token(credentials.credentials)
        user_id = int(payload["sub"])
    except (AccessTokenError, ValueError):
        raise _unauthorized("Invalid access token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise _unauthorized("User not found")

    return user


# ==================== Service factories ====================


def get_match_data_service(
    cache: CacheGateway = Depends(get_cache),
    client: FootballClient = Depends(get_football_client),
    news_client: NewsClient = Depends(get_news_client),
) -> MatchDataService:
    return MatchDataService(cache, client, news_client)


def get_lineup_service(
    cache: CacheGateway = Depends(get_cache),
    match_data: MatchDataService = Depends(get_match_data_service),
) -> LineupService:
    return LineupService(cache, match_data)


def get_debate_store(db: AsyncSession = Depends(get_db)) -> SqlDebateStore:
    return SqlDebateStore(db)


def get_debate_generator(cache: CacheGateway = Depends(get_cache)) -> DebateGenerator:
    return DebateGenerator(cache)


def get_debate_aggregator(
    match_data: MatchDataService = Depends(get_match_data_service),
    lineups: LineupService = Depends(get_lineup_service),
    social_client: SocialClient = Depends(get_social_client),
) -> DebateDataAggregator:
    return DebateDataAggregator(match_data, lineups, social_client)


def get_lifecycle_controller(
    store: SqlDebateStore = Depends(get_debate_store),
    match_data: MatchDataService = Depends(get_match_data_service),
    aggregator: DebateDataAggregator = Depends(get_debate_aggregator),
    generator: DebateGenerator = Depends(get_debate_generator),
) -> DebateLifecycleController:
    return DebateLifecycleController(store, match_data, aggregator, generator)
