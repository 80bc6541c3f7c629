"""
Cache freshness policy.

Decides how long fetched sports data may be served from cache. Live
matches change by the minute, fixtures rarely change before kickoff and
final results never change, so the TTL follows the match phase. A
collection is only as fresh as its most volatile member.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from datetime import timedelta

from app.config import Settings, get_settings
from app.utils.match_status import MatchPhase, classify_match_status


class CachedResource(str, enum.Enum):
    """Resource families with their own TTL ceiling."""
    fixtures = "fixtures"
    lineup = "lineup"
    team_info = "team_info"
    league_table = "league_table"
    standings = "standings"
    news = "news"
    prompt = "prompt"


class FreshnessPolicy:
    def __init__(self, settings: Settings | None = None):
        settings = settings or get_settings()
        self.live_ttl = timedelta(seconds=settings.live_match_ttl_seconds)
        self.fixture_ttl = timedelta(seconds=settings.fixture_ttl_seconds)
        self.finished_ttl = timedelta(seconds=settings.finished_match_ttl_seconds)
        self.default_ttl = timedelta(seconds=settings.default_ttl_seconds)
        self._phase_ttls = {
            MatchPhase.in_progress: self.live_ttl,
            MatchPhase.not_started: self.fixture_ttl,
            MatchPhase.finished: self.finished_ttl,
            MatchPhase.called_off: self.fixture_ttl,
        }
        self._resource_ttls = {
            CachedResource.fixtures: self.default_ttl,
            CachedResource.lineup: timedelta(seconds=settings.lineup_ttl_seconds),
            CachedResource.team_info: timedelta(seconds=settings.team_info_ttl_seconds),
            CachedResource.league_table: timedelta(seconds=settings.league_table_ttl_seconds),
            CachedResource.standings: timedelta(seconds=settings.standings_ttl_seconds),
            CachedResource.news: timedelta(seconds=settings.news_ttl_seconds),
            CachedResource.prompt: timedelta(seconds=settings.prompt_ttl_seconds),
        }

    def ttl_for(self, status: str | None) -> timedelta:
        """TTL for data describing a single match in the given status."""
        phase = classify_match_status(status)
        return self._phase_ttls.get(phase, self.default_ttl)

    def ttl_for_collection(
        self,
        statuses: Iterable[str | None],
        ceiling: timedelta | None = None,
    ) -> timedelta:
        """Most conservative TTL across a collection of match statuses.

        One live match in an otherwise finished list must keep the whole
        list short-lived. The result never exceeds ``ceiling`` (the default
        TTL unless given), which is also what an empty collection gets.
        """
        ttl = self.default_ttl if ceiling is None else ceiling
        for status in statuses:
            item_ttl = self.ttl_for(status)
            if item_ttl < ttl:
                ttl = item_ttl
        return ttl

    def ttl_for_resource(
        self,
        resource: CachedResource,
        statuses: Iterable[str | None] = (),
    ) -> timedelta:
        """TTL for a resource family, capped by the statuses it depends on."""
        return self.ttl_for_collection(statuses, ceiling=self._resource_ttls[resource])


def get_freshness_policy() -> FreshnessPolicy:
    return FreshnessPolicy(get_settings())
