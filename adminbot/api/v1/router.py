"""Main router for API v1."""

from fastapi import APIRouter

from adminbot.api.v1.routes.events import router as events_router

api_router = APIRouter()

api_router.include_router(events_router, tags=["events"])
