import logging

from app.caching import CacheGateway, CacheKeys
from app.config import get_settings
from app.schemas.lineup import MatchLineup
from app.services.freshness import CachedResource
from app.services.match_data import MatchDataService
from app.services.player_reconciler import reconcile_lineup
from app.utils.errors import LineupUnavailableError, UpstreamError

logger = logging.getLogger(__name__)


class LineupService:
    """Serves match lineups enriched with squad photos."""

    def __init__(
        self,
        cache: CacheGateway,
        match_data: MatchDataService,
        similarity_threshold: float | None = None,
    ):
        self.cache = cache
        self.match_data = match_data
        self.client = match_data.client
        self.policy = match_data.policy
        if similarity_threshold is None:
            similarity_threshold = get_settings().name_similarity_threshold
        self.similarity_threshold = similarity_threshold

    async def get_match_lineup(self, match_id: str) -> MatchLineup | None:
        """Reconciled lineup, or None while the provider has not published it.

        Raises UpstreamError when the lineup feed fails and
        LineupUnavailableError when a squad needed for reconciliation
        cannot be fetched.
        """
        key = CacheKeys.lineup(match_id)
        cached = await self.cache.get(key, MatchLineup)
        if cached is not None:
            return cached

        feeds = await self.client.fetch_lineup(match_id)
        if len(feeds) < 2:
            logger.info("Lineup for match %s not published yet (%d team entries)", match_id, len(feeds))
            return None

        home_feed, away_feed = feeds[0], feeds[1]
        try:
            home_roster = await self.match_data.get_team_squad(home_feed.team_id)
            away_roster = await self.match_data.get_team_squad(away_feed.team_id)
        except UpstreamError as e:
            raise LineupUnavailableError(f"Failed to get team squad for match {match_id}: {e}") from e

        lineup = MatchLineup(
            match_id=match_id,
            home=reconcile_lineup(home_feed, home_roster.players, self.similarity_threshold),
            away=reconcile_lineup(away_feed, away_roster.players, self.similarity_threshold),
        )

        ttl = self.policy.ttl_for_resource(CachedResource.lineup, await self._match_statuses(match_id))
        await self.cache.set(key, lineup, ttl)
        return lineup

    async def _match_statuses(self, match_id: str) -> list[str]:
        try:
            info = await self.match_data.get_fixture(match_id, fresh=True)
        except UpstreamError as e:
            logger.warning("Could not read status of match %s for lineup TTL: %s", match_id, e)
            return []
        return [info.status] if info else []
