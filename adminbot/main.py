"""FastAPI entrypoint for the admin bot backend."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from adminbot.api.v1.router import api_router
from adminbot.api.v1.routes.events import close_bot_service
from adminbot.core.settings import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    # The Redis pool and account HTTP client live as long as the process.
    await close_bot_service()


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)


@app.get("/")
async def health_check() -> dict[str, str]:
    """Simple health endpoint to validate service status."""
    return {"status": "ok", "message": "Admin bot backend is running"}


# Mount API v1 routes under /api/v1.
app.include_router(api_router, prefix="/api/v1")
