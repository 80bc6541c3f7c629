"""Schemas for match context assembled for debate generation."""

from pydantic import BaseModel

from app.schemas.lineup import PlayerRecord


class MatchInfo(BaseModel):
    """Fixture summary mapped from the football provider."""
    match_id: str
    home_team: str = ""
    away_team: str = ""
    home_team_id: int | None = None
    away_team_id: int | None = None
    date: str = ""
    status: str = ""
    venue: str = ""
    league: str = ""
    season: str = ""
    home_score: int | None = None
    away_score: int | None = None


class MatchStats(BaseModel):
    home_score: int = 0
    away_score: int = 0
    home_goals: int = 0
    away_goals: int = 0
    home_shots: int = 0
    away_shots: int = 0
    home_possession: int = 0
    away_possession: int = 0
    home_fouls: int = 0
    away_fouls: int = 0
    home_yellow_cards: int = 0
    away_yellow_cards: int = 0
    home_red_cards: int = 0
    away_red_cards: int = 0


class LineupData(BaseModel):
    home_starters: list[PlayerRecord] = []
    home_substitutes: list[PlayerRecord] = []
    away_starters: list[PlayerRecord] = []
    away_substitutes: list[PlayerRecord] = []


class SocialSignals(BaseModel):
    """What people are talking about around a match."""
    top_topics: list[str] = []
    notable_posts: list[str] = []


class MatchData(BaseModel):
    match_id: str
    home_team: str = ""
    away_team: str = ""
    date: str = ""
    status: str = ""
    venue: str = ""
    league: str = ""
    season: str = ""
    lineups: LineupData | None = None
    stats: MatchStats | None = None
    news_headlines: list[str] = []
    social: SocialSignals | None = None


class LeagueSummary(BaseModel):
    name: str = ""
    country: str = ""
    logo: str = ""
