from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.caching import CacheGateway, get_cache

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/redis")
async def redis_health(cache: CacheGateway = Depends(get_cache)):
    if not await cache.health_check():
        return JSONResponse(status_code=503, content={"status": "unhealthy", "redis": "unavailable"})
    return {"status": "healthy", "redis": "connected"}


@router.get("/cache-stats")
async def cache_stats(cache: CacheGateway = Depends(get_cache)):
    return await cache.get_stats()
