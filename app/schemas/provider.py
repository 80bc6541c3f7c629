"""
Upstream provider payload schemas.

These mirror the wire shapes of the third-party APIs (API-Football v3,
Google News via RapidAPI, Twitter API v2). Unknown fields are ignored so
that provider additions do not break decoding; the mapping into core types
lives in the clients and services, never in the reconciliation logic.
"""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProviderModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ApiFootballEnvelope(ProviderModel):
    """Fields every API-Football v3 response carries around its ``response`` list.

    Auth and quota failures arrive with HTTP 200 and a non-empty ``errors``
    (a list, or a dict keyed by the failing concern).
    """
    get: str | None = None
    parameters: dict[str, Any] = {}
    errors: list[Any] | dict[str, Any] = []
    results: int = 0
    paging: dict[str, Any] = {}


# ==================== API-Football v3: fixtures ====================

class FixtureStatus(ProviderModel):
    long: str | None = None
    short: str | None = None
    elapsed: int | None = None


class FixtureVenue(ProviderModel):
    id: int | None = None
    name: str | None = None
    city: str | None = None


class FixtureInfo(ProviderModel):
    id: int
    referee: str | None = None
    timezone: str | None = None
    date: str | None = None
    timestamp: int | None = None
    venue: FixtureVenue = FixtureVenue()
    status: FixtureStatus = FixtureStatus()


class FixtureLeague(ProviderModel):
    id: int | None = None
    name: str | None = None
    country: str | None = None
    logo: str | None = None
    flag: str | None = None
    season: int | None = None
    round: str | None = None


class FixtureTeam(ProviderModel):
    id: int | None = None
    name: str | None = None
    logo: str | None = None
    winner: bool | None = None


class FixtureTeams(ProviderModel):
    home: FixtureTeam = FixtureTeam()
    away: FixtureTeam = FixtureTeam()


class FixtureGoals(ProviderModel):
    home: int | None = None
    away: int | None = None


class Fixture(ProviderModel):
    fixture: FixtureInfo
    league: FixtureLeague = FixtureLeague()
    teams: FixtureTeams = FixtureTeams()
    goals: FixtureGoals = FixtureGoals()
    score: dict[str, Any] = {}


class FixturesResponse(ApiFootballEnvelope):
    response: list[Fixture] = []


# ==================== API-Football v3: lineups ====================

class LineupPlayerPayload(ProviderModel):
    id: int | None = None
    name: str | None = None
    number: int | None = None
    pos: str | None = None
    grid: str | None = None


class LineupEntry(ProviderModel):
    player: LineupPlayerPayload


class LineupTeamInfo(ProviderModel):
    id: int
    name: str | None = None
    logo: str | None = None


class TeamLineupPayload(ProviderModel):
    team: LineupTeamInfo
    formation: str | None = None
    start_xi: list[LineupEntry] = Field(default=[], alias="startXI")
    substitutes: list[LineupEntry] = []


class LineupsResponse(ApiFootballEnvelope):
    response: list[TeamLineupPayload] = []


# ==================== API-Football v3: squads ====================

class SquadPlayerPayload(ProviderModel):
    id: int | None = None
    name: str | None = None
    age: int | None = None
    number: int | None = None
    position: str | None = None
    photo: str | None = None


class SquadTeamInfo(ProviderModel):
    id: int | None = None
    name: str | None = None
    logo: str | None = None


class SquadPayload(ProviderModel):
    team: SquadTeamInfo = SquadTeamInfo()
    players: list[SquadPlayerPayload] = []


class SquadResponse(ApiFootballEnvelope):
    response: list[SquadPayload] = []


# ==================== API-Football v3: statistics ====================

class StatisticPayload(ProviderModel):
    type: str
    value: Any = None


class TeamStatisticsPayload(ProviderModel):
    team: SquadTeamInfo = SquadTeamInfo()
    statistics: list[StatisticPayload] = []


class StatisticsResponse(ApiFootballEnvelope):
    response: list[TeamStatisticsPayload] = []


# ==================== API-Football v3: leagues & standings ====================

class LeagueDetails(ProviderModel):
    id: int | None = None
    name: str | None = None
    type: str | None = None
    logo: str | None = None


class LeagueCountry(ProviderModel):
    name: str | None = None
    code: str | None = None
    flag: str | None = None


class LeagueEntry(ProviderModel):
    league: LeagueDetails = LeagueDetails()
    country: LeagueCountry = LeagueCountry()


class LeaguesResponse(ApiFootballEnvelope):
    response: list[LeagueEntry] = []


class StandingsResponse(ApiFootballEnvelope):
    response: list[dict[str, Any]] = []


# ==================== Google News (RapidAPI) ====================

class NewsImages(ProviderModel):
    thumbnail: str | None = None
    thumbnail_proxied: str | None = Field(default=None, alias="thumbnailProxied")


class NewsItem(ProviderModel):
    timestamp: str | None = None
    title: str | None = None
    snippet: str | None = None
    images: NewsImages | None = None
    news_url: str | None = Field(default=None, alias="newsUrl")
    publisher: str | None = None


class NewsSearchResponse(ProviderModel):
    status: str | None = None
    items: list[NewsItem] = []


# ==================== Twitter API v2 ====================

class TweetMetrics(ProviderModel):
    retweet_count: int = 0
    reply_count: int = 0
    like_count: int = 0
    quote_count: int = 0


class Tweet(ProviderModel):
    id: str
    text: str = ""
    created_at: str | None = None
    author_id: str | None = None
    public_metrics: TweetMetrics = TweetMetrics()


class TweetSearchResponse(ProviderModel):
    data: list[Tweet] = []
    meta: dict[str, Any] = {}
