import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.deps import get_lineup_service, get_match_data_service
from app.schemas.common import MessageResponse
from app.schemas.lineup import MatchLineup
from app.schemas.match import LeagueSummary
from app.schemas.provider import FixturesResponse, StandingsResponse
from app.services.lineup_service import LineupService
from app.services.match_data import MatchDataService
from app.utils.errors import LineupUnavailableError, UpstreamError
from app.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/futbol", tags=["futbol"])


@router.get("/matches", response_model=FixturesResponse)
async def get_matches(
    date: str = Query(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="YYYY-MM-DD"),
    service: MatchDataService = Depends(get_match_data_service),
):
    """All fixtures on a date, cached for as long as the most volatile one allows."""
    try:
        return await service.get_matches(date)
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e


@router.get("/lineup", response_model=MatchLineup | MessageResponse)
async def get_match_lineup(
    match_id: str = Query(..., min_length=1),
    service: LineupService = Depends(get_lineup_service),
):
    """Lineup with squad photos merged in."""
    try:
        lineup = await service.get_match_lineup(match_id)
    except (UpstreamError, LineupUnavailableError) as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    if lineup is None:
        return MessageResponse(message="No lineup data available")
    return lineup


@router.get("/leagues", response_model=list[LeagueSummary])
async def get_leagues(
    season: int | None = Query(None, ge=1900, le=2100),
    service: MatchDataService = Depends(get_match_data_service),
):
    try:
        return await service.get_leagues(season or utcnow().year)
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e


@router.get("/team_standings", response_model=StandingsResponse)
async def get_team_standings(
    team_id: str = Query(..., min_length=1),
    season: int | None = Query(None, ge=1900, le=2100),
    service: MatchDataService = Depends(get_match_data_service),
):
    try:
        return await service.get_team_standings(team_id, season or utcnow().year)
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e


@router.get("/league_standings", response_model=StandingsResponse)
async def get_league_standings(
    league_id: str = Query(..., min_length=1),
    season: str = Query(..., min_length=4),
    service: MatchDataService = Depends(get_match_data_service),
):
    try:
        return await service.get_league_standings(league_id, season)
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
