"""Assembles the match context handed to the debate generator."""

from __future__ import annotations

import logging
import re
from collections import Counter

from app.config import get_settings
from app.schemas.lineup import MatchLineup
from app.schemas.match import LineupData, MatchData, MatchInfo, MatchStats, SocialSignals
from app.services.lineup_service import LineupService
from app.services.match_data import MatchDataService
from app.services.social_client import SocialClient, get_social_client
from app.utils.errors import LineupUnavailableError, UpstreamError
from app.utils.match_status import MatchPhase, classify_match_status

logger = logging.getLogger(__name__)

_HASHTAG_RE = re.compile(r"#(\w+)")


class DebateDataAggregator:
    """
    Enriches a fixture with lineups, statistics, headlines and social signals.

    Each source is optional: a failing source is logged and left out, the
    fixture itself is always present.
    """

    _MAX_TOPICS = 5
    _MAX_POSTS = 3

    def __init__(
        self,
        match_data: MatchDataService,
        lineups: LineupService,
        social_client: SocialClient | None = None,
        headlines_limit: int | None = None,
    ):
        self.match_data = match_data
        self.lineups = lineups
        self.social_client = social_client or get_social_client()
        if headlines_limit is None:
            headlines_limit = get_settings().news_headlines_limit
        self.headlines_limit = headlines_limit

    async def aggregate(self, info: MatchInfo) -> MatchData:
        data = MatchData(
            match_id=info.match_id,
            home_team=info.home_team,
            away_team=info.away_team,
            date=info.date,
            status=info.status,
            venue=info.venue,
            league=info.league,
            season=info.season,
        )
        stats = MatchStats(
            home_score=info.home_score or 0,
            away_score=info.away_score or 0,
            home_goals=info.home_score or 0,
            away_goals=info.away_score or 0,
        )

        phase = classify_match_status(info.status)
        if phase in (MatchPhase.not_started, MatchPhase.in_progress):
            data.lineups = await self._fetch_lineups(info.match_id)
        if phase in (MatchPhase.in_progress, MatchPhase.finished):
            detailed = await self._fetch_stats(info.match_id)
            if detailed is not None:
                # Scores come from the fixture, everything else from statistics.
                stats = detailed.model_copy(
                    update={"home_score": stats.home_score, "away_score": stats.away_score}
                )
        data.stats = stats

        data.news_headlines = await self._fetch_headlines(info.home_team, info.away_team)
        data.social = await self._fetch_social_signals(info.home_team, info.away_team)
        return data

    async def _fetch_lineups(self, match_id: str) -> LineupData | None:
        try:
            lineup = await self.lineups.get_match_lineup(match_id)
        except (UpstreamError, LineupUnavailableError) as e:
            logger.warning("Failed to fetch lineups for match %s: %s", match_id, e)
            return None
        if lineup is None:
            return None
        return to_lineup_data(lineup)

    async def _fetch_stats(self, match_id: str) -> MatchStats | None:
        try:
            return await self.match_data.client.fetch_statistics(match_id)
        except UpstreamError as e:
            logger.warning("Failed to fetch detailed match stats for match %s: %s", match_id, e)
            return None

    async def _fetch_headlines(self, home_team: str, away_team: str) -> list[str]:
        if not self.match_data.news_client.is_configured:
            return []

        queries = [q for q in (home_team, away_team) if q]
        if home_team and away_team:
            queries.append(f"{home_team} vs {away_team}")

        headlines: list[str] = []
        for query in queries:
            try:
                payload = await self.match_data.search_news(query)
            except UpstreamError as e:
                logger.warning("Failed to fetch news for %r: %s", query, e)
                continue
            headlines.extend(item.title for item in payload.items if item.title)

        return headlines[: self.headlines_limit]

    async def _fetch_social_signals(self, home_team: str, away_team: str) -> SocialSignals | None:
        if not self.social_client.is_configured:
            return None
        try:
            posts = await self.social_client.search_recent_posts(f"{home_team} {away_team}")
        except UpstreamError as e:
            logger.warning("Failed to fetch social posts for %s vs %s: %s", home_team, away_team, e)
            return None
        if not posts:
            return None

        hashtags = Counter(
            tag.lower() for post in posts for tag in _HASHTAG_RE.findall(post.text)
        )
        most_replied = sorted(posts, key=lambda p: p.public_metrics.reply_count, reverse=True)
        return SocialSignals(
            top_topics=[f"#{tag}" for tag, _ in hashtags.most_common(self._MAX_TOPICS)],
            notable_posts=[p.text for p in most_replied[: self._MAX_POSTS]],
        )


def to_lineup_data(lineup: MatchLineup) -> LineupData:
    return LineupData(
        home_starters=lineup.home.starters,
        home_substitutes=lineup.home.substitutes,
        away_starters=lineup.away.starters,
        away_substitutes=lineup.away.substitutes,
    )
