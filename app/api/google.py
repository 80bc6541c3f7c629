from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.deps import get_match_data_service
from app.schemas.provider import NewsSearchResponse
from app.services.match_data import MatchDataService
from app.utils.errors import UpstreamError

router = APIRouter(prefix="/google", tags=["google"])


@router.get("/search", response_model=NewsSearchResponse)
async def search_news(
    q: str = Query(..., min_length=1),
    lr: str | None = Query(None, description="Language/region, e.g. en-US"),
    service: MatchDataService = Depends(get_match_data_service),
):
    try:
        return await service.search_news(q, lr)
    except UpstreamError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
