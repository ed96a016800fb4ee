"""Conversation state lifecycle on top of a TTL-expiring store."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from adminbot.interfaces.state_store import StateStore
from adminbot.services.conversation_state import BotState, ConversationState

logger = logging.getLogger(__name__)

DEFAULT_STATE_TTL = timedelta(minutes=30)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConversationManager:
    """Owns load-or-default, save-with-TTL, transitions and resets per operator.

    Absence in the store and an IDLE state are indistinguishable to callers:
    a missing key materializes as a fresh IDLE state that is only written on
    the next mutating call.
    """

    def __init__(
        self,
        store: StateStore,
        default_ttl: timedelta = DEFAULT_STATE_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.default_ttl = default_ttl
        self._clock = clock

    async def get_state(self, operator_id: int) -> ConversationState:
        """Return current state for operator, defaulting to idle."""
        state = await self.store.get(operator_id)
        if state is None:
            logger.debug("No state found for operator %s, returning IDLE", operator_id)
            return ConversationState.idle()
        return state

    async def get_current_tag(self, operator_id: int) -> BotState:
        state = await self.get_state(operator_id)
        return state.state

    async def set_state(
        self,
        operator_id: int,
        state: ConversationState,
        ttl: timedelta | None = None,
    ) -> ConversationState:
        """Stamp timestamps and write through to the store, refreshing expiry."""
        now = self._clock()
        if state.created_at is None:
            state.created_at = now
        state.updated_at = max(now, state.created_at)
        effective_ttl = ttl if ttl is not None else self.default_ttl
        await self.store.set(operator_id, state, effective_ttl)
        logger.debug(
            "Set state for operator %s: %s v%s (ttl=%s)",
            operator_id,
            state.state.value,
            state.version,
            effective_ttl,
        )
        return state

    async def transition_to(
        self,
        operator_id: int,
        new_tag: BotState,
        updates: Mapping[str, Any] | None = None,
        ttl: timedelta | None = None,
    ) -> ConversationState:
        """Move to new_tag keeping the payload; optional updates land in the same write."""
        state = await self.get_state(operator_id)
        previous = state.state
        for key, value in (updates or {}).items():
            state.put(key, value)
        state.state = new_tag
        state.increment_version()
        await self.set_state(operator_id, state, ttl)
        logger.info("Operator %s transitioned %s -> %s", operator_id, previous.value, new_tag.value)
        return state

    async def transition_to_with_clear(
        self,
        operator_id: int,
        new_tag: BotState,
        initial: Mapping[str, Any] | None = None,
        ttl: timedelta | None = None,
    ) -> ConversationState:
        """Replace whatever is stored with a brand-new state at new_tag (version 0)."""
        state = ConversationState(state=new_tag)
        for key, value in (initial or {}).items():
            state.put(key, value)
        await self.set_state(operator_id, state, ttl)
        logger.info("Operator %s transitioned to %s (data cleared)", operator_id, new_tag.value)
        return state

    async def update_data(
        self,
        operator_id: int,
        key: str,
        value: Any,
        ttl: timedelta | None = None,
    ) -> ConversationState:
        """Set one payload entry without changing the state tag."""
        state = await self.get_state(operator_id)
        state.put(key, value)
        state.increment_version()
        await self.set_state(operator_id, state, ttl)
        logger.debug("Updated state data for operator %s: %s", operator_id, key)
        return state

    async def reset_to_idle(self, operator_id: int) -> ConversationState:
        """Unconditional escape hatch back to IDLE; never consults the transition table."""
        state = await self.transition_to_with_clear(operator_id, BotState.IDLE)
        logger.info("Operator %s state reset to IDLE", operator_id)
        return state

    async def clear_state(self, operator_id: int) -> None:
        """Delete the stored key; the next read yields IDLE."""
        await self.store.delete(operator_id)
        logger.debug("Cleared state for operator %s", operator_id)

    async def is_in_state(self, operator_id: int, expected: BotState) -> bool:
        return await self.get_current_tag(operator_id) == expected
