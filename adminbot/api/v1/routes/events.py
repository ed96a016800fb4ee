"""Inbound bot event endpoint."""

from __future__ import annotations

import logging
from datetime import timedelta
from functools import lru_cache

from fastapi import APIRouter, Depends

from adminbot.core.settings import settings
from adminbot.interfaces.state_store import StateStore
from adminbot.providers.accounts.http_account_client import HttpAccountClient
from adminbot.providers.state_stores.memory_store import InMemoryStateStore
from adminbot.providers.state_stores.redis_store import RedisStateStore
from adminbot.schemas.events import BotReply, InboundEvent
from adminbot.services.admin_service import SqlPrivilegeLookup
from adminbot.services.audit_service import SqlAuditLogWriter
from adminbot.services.bot_service import BotService
from adminbot.services.invite_service import SqlInviteIssuer

logger = logging.getLogger(__name__)

router = APIRouter()


def _build_state_store() -> StateStore:
    if settings.use_in_memory_state:
        logger.warning("Using in-memory conversation state; state is lost on restart")
        return InMemoryStateStore()
    return RedisStateStore.from_url(settings.redis_url, key_prefix=settings.state_key_prefix)


@lru_cache
def get_bot_service() -> BotService:
    """Build the process-wide BotService on first use."""
    return BotService(
        state_store=_build_state_store(),
        account_client=HttpAccountClient(
            settings.account_service_url,
            timeout=settings.account_service_timeout_seconds,
        ),
        audit_log=SqlAuditLogWriter(),
        privilege_lookup=SqlPrivilegeLookup(),
        invite_issuer=SqlInviteIssuer(
            ttl=timedelta(hours=settings.invite_ttl_hours),
            token_bytes=settings.invite_token_bytes,
        ),
        state_ttl=timedelta(seconds=settings.state_ttl_seconds),
        confirmation_ttl=timedelta(seconds=settings.confirmation_ttl_seconds),
        search_page_size=settings.search_page_size,
        bot_username=settings.bot_username,
        invite_ttl_hours=settings.invite_ttl_hours,
    )


async def close_bot_service() -> None:
    """Close the cached BotService, if one was built, and forget it."""
    if get_bot_service.cache_info().currsize == 0:
        return
    bot_service = get_bot_service()
    get_bot_service.cache_clear()
    await bot_service.close()
    logger.info("Bot service connections closed")


@router.post("/events", response_model=BotReply)
async def receive_event(event: InboundEvent, bot_service: BotService = Depends(get_bot_service)) -> BotReply:
    """Run one operator event through the conversation engine and return the reply to render."""
    return await bot_service.handle_event(event)
