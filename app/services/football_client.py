import logging
from typing import Any, TypeVar

import httpx
from pydantic import ValidationError

from app.config import Settings, get_settings
from app.schemas.lineup import LineupPlayer, RosterPlayer, TeamLineupFeed, TeamRoster
from app.schemas.match import MatchInfo, MatchStats
from app.schemas.provider import (
    ApiFootballEnvelope,
    Fixture,
    FixturesResponse,
    LeaguesResponse,
    LineupEntry,
    LineupsResponse,
    SquadResponse,
    StandingsResponse,
    StatisticPayload,
    StatisticsResponse,
)
from app.utils.errors import UpstreamError

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=ApiFootballEnvelope)

SOURCE = "football"


class FootballClient:
    """Client for API-Football v3 (https://www.api-football.com/documentation-v3)."""

    def __init__(self, settings: Settings | None = None):
        settings = settings or get_settings()
        self.base_url = settings.football_api_base_url.rstrip("/")
        self.api_key = settings.football_api_key
        self.timeout = settings.upstream_timeout_seconds

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def get_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-rapidapi-key": self.api_key,
        }

    async def _make_request(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """
        Perform a single GET against the provider.

        There is no retry: a transport failure or non-2xx status surfaces
        immediately as UpstreamError.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            async with httpx.AsyncClient(follow_redirects=True, timeout=self.timeout) as client:
                response = await client.request(
                    "GET",
                    url,
                    headers=self.get_headers(),
                    params=params,
                )
                response.raise_for_status()
                return response
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                SOURCE,
                f"{path} returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(SOURCE, f"{path} request failed: {e}") from e

    async def _get(self, path: str, params: dict[str, Any], model: type[E]) -> E:
        response = await self._make_request(path, params)
        try:
            payload = model.model_validate_json(response.content)
        except ValidationError as e:
            raise UpstreamError(SOURCE, f"unexpected {path} payload: {e.error_count()} errors") from e

        # API-Football reports auth/quota problems with HTTP 200 and a non-empty "errors".
        if payload.errors:
            raise UpstreamError(SOURCE, f"{path} reported errors: {payload.errors}")
        return payload

    # ==================== Fixtures ====================

    async def fetch_fixtures(self, date: str) -> FixturesResponse:
        """All fixtures on a date (YYYY-MM-DD)."""
        return await self._get("fixtures", {"date": date}, FixturesResponse)

    async def fetch_fixture(self, match_id: str) -> Fixture | None:
        payload = await self._get("fixtures", {"id": match_id}, FixturesResponse)
        if not payload.response:
            return None
        return payload.response[0]

    async def fetch_match_info(self, match_id: str) -> MatchInfo | None:
        fixture = await self.fetch_fixture(match_id)
        if fixture is None:
            return None
        return to_match_info(fixture)

    # ==================== Lineups & squads ====================

    async def fetch_lineup(self, match_id: str) -> list[TeamLineupFeed]:
        """Lineup entries for a fixture, home team first when published."""
        payload = await self._get("fixtures/lineups", {"fixture": match_id}, LineupsResponse)
        return [
            TeamLineupFeed(
                team_id=entry.team.id,
                team_name=entry.team.name,
                formation=entry.formation,
                starters=[_to_lineup_player(item) for item in entry.start_xi],
                substitutes=[_to_lineup_player(item) for item in entry.substitutes],
            )
            for entry in payload.response
        ]

    async def fetch_squad(self, team_id: int) -> TeamRoster:
        payload = await self._get("players/squads", {"team": team_id}, SquadResponse)
        if not payload.response:
            logger.warning("Empty squad returned for team %s", team_id)
            return TeamRoster(team_id=team_id)

        squad = payload.response[0]
        return TeamRoster(
            team_id=team_id,
            team_name=squad.team.name,
            players=[
                RosterPlayer(
                    id=p.id or 0,
                    name=p.name or "",
                    number=p.number or 0,
                    position=p.position or "",
                    age=p.age,
                    photo=p.photo or "",
                )
                for p in squad.players
            ],
        )

    # ==================== Statistics ====================

    async def fetch_statistics(self, match_id: str) -> MatchStats | None:
        """Per-team statistics; None until the provider has both teams."""
        payload = await self._get("fixtures/statistics", {"fixture": match_id}, StatisticsResponse)
        if len(payload.response) < 2:
            return None

        home = payload.response[0].statistics
        away = payload.response[1].statistics
        return MatchStats(
            home_goals=_stat_value(home, "Goals"),
            away_goals=_stat_value(away, "Goals"),
            home_shots=_stat_value(home, "Total Shots"),
            away_shots=_stat_value(away, "Total Shots"),
            home_possession=_stat_value(home, "Ball Possession"),
            away_possession=_stat_value(away, "Ball Possession"),
            home_fouls=_stat_value(home, "Fouls"),
            away_fouls=_stat_value(away, "Fouls"),
            home_yellow_cards=_stat_value(home, "Yellow Cards"),
            away_yellow_cards=_stat_value(away, "Yellow Cards"),
            home_red_cards=_stat_value(home, "Red Cards"),
            away_red_cards=_stat_value(away, "Red Cards"),
        )

    # ==================== Leagues & standings ====================

    async def fetch_leagues(self, season: int) -> LeaguesResponse:
        return await self._get("leagues", {"season": season}, LeaguesResponse)

    async def fetch_standings(self, league_id: str, season: str) -> StandingsResponse:
        return await self._get("standings", {"league": league_id, "season": season}, StandingsResponse)

    async def fetch_team_standings(self, team_id: str, season: int) -> StandingsResponse:
        return await self._get("standings", {"team": team_id, "season": season}, StandingsResponse)


def _to_lineup_player(entry: LineupEntry) -> LineupPlayer:
    player = entry.player
    return LineupPlayer(
        id=player.id or 0,
        name=player.name or "",
        number=player.number or 0,
        pos=player.pos or "",
        grid=player.grid,
    )


def _stat_value(statistics: list[StatisticPayload], stat_type: str) -> int:
    """Numeric value of a statistic; "55%" style strings are accepted."""
    for stat in statistics:
        if stat.type != stat_type:
            continue
        value = stat.value
        if isinstance(value, bool) or value is None:
            return 0
        if isinstance(value, (int, float)):
            return int(value)
        if isinstance(value, str):
            try:
                return int(float(value.strip().rstrip("%")))
            except ValueError:
                return 0
    return 0


def to_match_info(fixture: Fixture) -> MatchInfo:
    info = fixture.fixture
    return MatchInfo(
        match_id=str(info.id),
        home_team=fixture.teams.home.name or "",
        away_team=fixture.teams.away.name or "",
        home_team_id=fixture.teams.home.id,
        away_team_id=fixture.teams.away.id,
        date=info.date or "",
        status=info.status.short or "",
        venue=info.venue.name or "",
        league=fixture.league.name or "",
        season=str(fixture.league.season) if fixture.league.season is not None else "",
        home_score=fixture.goals.home,
        away_score=fixture.goals.away,
    )


_football_client: FootballClient | None = None


def get_football_client() -> FootballClient:
    global _football_client
    if _football_client is None:
        _football_client = FootballClient()
    return _football_client
