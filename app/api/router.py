from fastapi import APIRouter

from app.api.debates import router as debates_router
from app.api.futbol import router as futbol_router
from app.api.google import router as google_router
from app.api.health import router as health_router
from app.api.users import router as users_router

api_router = APIRouter()

# Provider data
api_router.include_router(futbol_router)
api_router.include_router(google_router)

# Debates
api_router.include_router(debates_router)
api_router.include_router(users_router)

# Operations
api_router.include_router(health_router)
