"""Redis-backed conversation state store."""

from __future__ import annotations

import logging
from datetime import timedelta

import redis.asyncio as redis
from pydantic import ValidationError

from adminbot.core.exceptions import PayloadValueError
from adminbot.interfaces.state_store import StateStore
from adminbot.services.conversation_state import ConversationState

logger = logging.getLogger(__name__)


class RedisStateStore(StateStore):
    """Stores one JSON document per operator under a namespaced key with SET EX.

    Connection and command errors are raised to the caller as-is; this layer
    never retries and never falls back to a default state.
    """

    def __init__(self, client: redis.Redis, key_prefix: str = "telegram:state:") -> None:
        self.client = client
        self.key_prefix = key_prefix

    @classmethod
    def from_url(cls, redis_url: str, key_prefix: str = "telegram:state:") -> RedisStateStore:
        client = redis.from_url(redis_url, encoding="utf-8", decode_responses=True)
        return cls(client=client, key_prefix=key_prefix)

    def build_key(self, operator_id: int) -> str:
        return f"{self.key_prefix}{operator_id}"

    async def get(self, operator_id: int) -> ConversationState | None:
        key = self.build_key(operator_id)
        raw = await self.client.get(key)
        if raw is None:
            logger.debug("No stored state under %s", key)
            return None
        try:
            return ConversationState.from_json(raw)
        except ValidationError as exc:
            raise PayloadValueError(f"Stored state under {key} cannot be decoded.") from exc

    async def set(self, operator_id: int, state: ConversationState, ttl: timedelta) -> None:
        key = self.build_key(operator_id)
        seconds = max(1, int(ttl.total_seconds()))
        await self.client.set(key, state.to_json(), ex=seconds)
        logger.debug("Stored state %s under %s (ttl=%ss)", state.state.value, key, seconds)

    async def delete(self, operator_id: int) -> None:
        await self.client.delete(self.build_key(operator_id))

    async def close(self) -> None:
        await self.client.aclose()
