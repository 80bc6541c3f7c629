"""
Cache-through reads of football and news provider data.

Every read consults the cache gateway first and falls back to the provider;
the TTL of what gets written is always chosen by the freshness policy from
the match statuses in the payload.
"""

import logging

from app.caching import CacheGateway, CacheKeys
from app.schemas.lineup import TeamRoster
from app.schemas.match import LeagueSummary, MatchInfo
from app.schemas.provider import FixturesResponse, LeaguesResponse, NewsSearchResponse, StandingsResponse
from app.services.football_client import FootballClient, get_football_client
from app.services.freshness import CachedResource, FreshnessPolicy, get_freshness_policy
from app.services.news_client import NewsClient, get_news_client

logger = logging.getLogger(__name__)


class MatchDataService:
    def __init__(
        self,
        cache: CacheGateway,
        client: FootballClient | None = None,
        news_client: NewsClient | None = None,
        policy: FreshnessPolicy | None = None,
    ):
        self.cache = cache
        self.client = client or get_football_client()
        self.news_client = news_client or get_news_client()
        self.policy = policy or get_freshness_policy()

    async def get_matches(self, date: str) -> FixturesResponse:
        key = CacheKeys.matches(date)
        cached = await self.cache.get(key, FixturesResponse)
        if cached is not None:
            return cached

        payload = await self.client.fetch_fixtures(date)
        ttl = self.policy.ttl_for_resource(
            CachedResource.fixtures,
            [item.fixture.status.short for item in payload.response],
        )
        await self.cache.set(key, payload, ttl)
        logger.info("Fetched %d fixtures for %s, cached for %s", len(payload.response), date, ttl)
        return payload

    async def get_fixture(self, match_id: str, *, fresh: bool = False) -> MatchInfo | None:
        """Fixture summary for one match.

        ``fresh=True`` skips the cache read (the result is still written
        back) for decisions that must not act on a stale status.
        """
        key = CacheKeys.fixture(match_id)
        if not fresh:
            cached = await self.cache.get(key, MatchInfo)
            if cached is not None:
                return cached

        info = await self.client.fetch_match_info(match_id)
        if info is None:
            return None
        await self.cache.set(key, info, self.policy.ttl_for(info.status))
        return info

    async def get_team_squad(self, team_id: int) -> TeamRoster:
        key = CacheKeys.team_squad(team_id)
        cached = await self.cache.get(key, TeamRoster)
        if cached is not None:
            return cached

        roster = await self.client.fetch_squad(team_id)
        await self.cache.set(key, roster, self.policy.ttl_for_resource(CachedResource.team_info))
        return roster

    async def get_leagues(self, year: int) -> list[LeagueSummary]:
        key = CacheKeys.leagues(year)
        payload = await self.cache.get(key, LeaguesResponse)
        if payload is None:
            payload = await self.client.fetch_leagues(year)
            await self.cache.set(key, payload, self.policy.ttl_for_resource(CachedResource.team_info))

        return [
            LeagueSummary(
                name=entry.league.name or "",
                country=entry.country.name or "",
                logo=entry.league.logo or "",
            )
            for entry in payload.response
        ]

    async def get_team_standings(self, team_id: str, year: int) -> StandingsResponse:
        key = CacheKeys.team_standings(team_id, year)
        cached = await self.cache.get(key, StandingsResponse)
        if cached is not None:
            return cached

        payload = await self.client.fetch_team_standings(team_id, year)
        await self.cache.set(key, payload, self.policy.ttl_for_resource(CachedResource.standings))
        return payload

    async def get_league_standings(self, league_id: str, season: str) -> StandingsResponse:
        key = CacheKeys.league_standings(league_id, season)
        cached = await self.cache.get(key, StandingsResponse)
        if cached is not None:
            return cached

        payload = await self.client.fetch_standings(league_id, season)
        await self.cache.set(key, payload, self.policy.ttl_for_resource(CachedResource.league_table))
        return payload

    async def search_news(self, query: str, language: str | None = None) -> NewsSearchResponse:
        language = language or self.news_client.default_language
        key = CacheKeys.news(query, language)
        cached = await self.cache.get(key, NewsSearchResponse)
        if cached is not None:
            return cached

        payload = await self.news_client.search(query, language)
        await self.cache.set(key, payload, self.policy.ttl_for_resource(CachedResource.news))
        return payload
