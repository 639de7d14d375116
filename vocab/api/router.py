"""Root router shared by every service; health is mounted unprefixed at /health."""

from fastapi import APIRouter

from vocab.api.health import router as health_router

api_router = APIRouter()
api_router.include_router(health_router)
