"""Pydantic schemas for match lineups and squad rosters."""

from pydantic import BaseModel


class LineupPlayer(BaseModel):
    """Player as listed by the fixture-lineup feed.

    Authoritative for position, grid slot and starting status.
    id == 0 and number == 0 mean "unknown".
    """
    id: int = 0
    name: str = ""
    number: int = 0
    pos: str = ""
    grid: str | None = None


class RosterPlayer(BaseModel):
    """Player as listed by the squad feed. Authoritative for the photo."""
    id: int = 0
    name: str = ""
    number: int = 0
    position: str = ""
    age: int | None = None
    photo: str = ""


class TeamRoster(BaseModel):
    team_id: int
    team_name: str | None = None
    players: list[RosterPlayer] = []


class PlayerRecord(BaseModel):
    """Lineup player enriched with roster metadata."""
    id: int = 0
    name: str = ""
    number: int = 0
    pos: str = ""
    grid: str | None = None
    photo: str = ""


class TeamLineupFeed(BaseModel):
    team_id: int
    team_name: str | None = None
    formation: str | None = None
    starters: list[LineupPlayer] = []
    substitutes: list[LineupPlayer] = []


class TeamLineup(BaseModel):
    team_id: int
    team_name: str | None = None
    formation: str | None = None
    starters: list[PlayerRecord] = []
    substitutes: list[PlayerRecord] = []


class MatchLineup(BaseModel):
    match_id: str
    home: TeamLineup
    away: TeamLineup
