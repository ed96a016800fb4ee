"""Static transition table and validated state changes."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import timedelta
from types import MappingProxyType
from typing import Any

from adminbot.core.exceptions import StateConflictError
from adminbot.services.conversation_manager import ConversationManager
from adminbot.services.conversation_state import BotState, ConversationState

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: Mapping[BotState, frozenset[BotState]] = MappingProxyType(
    {
        BotState.IDLE: frozenset(
            {
                BotState.AWAITING_SEARCH_QUERY,
                # One-shot "/search <query>".
                BotState.SHOWING_SEARCH_RESULTS,
                BotState.AWAITING_ADMIN_ROLE,
                BotState.AWAITING_BAN_REASON,
            }
        ),
        BotState.AWAITING_SEARCH_QUERY: frozenset(
            {
                BotState.SHOWING_SEARCH_RESULTS,
                BotState.IDLE,
            }
        ),
        BotState.SHOWING_SEARCH_RESULTS: frozenset(
            {
                BotState.SHOWING_SEARCH_RESULTS,
                BotState.AWAITING_SEARCH_QUERY,
                BotState.AWAITING_BAN_REASON,
                BotState.IDLE,
            }
        ),
        BotState.AWAITING_ADMIN_ROLE: frozenset(
            {
                BotState.CONFIRMING_ADMIN_CREATION,
                BotState.IDLE,
            }
        ),
        BotState.CONFIRMING_ADMIN_CREATION: frozenset({BotState.IDLE}),
        BotState.AWAITING_BAN_REASON: frozenset(
            {
                BotState.CONFIRMING_BAN,
                BotState.IDLE,
            }
        ),
        BotState.CONFIRMING_BAN: frozenset({BotState.IDLE}),
    }
)


class TransitionValidator:
    """Rejects state changes that are not edges of the transition table.

    Resetting to IDLE does not go through here; see
    ConversationManager.reset_to_idle.
    """

    def __init__(
        self,
        conversation_manager: ConversationManager,
        transitions: Mapping[BotState, frozenset[BotState]] = ALLOWED_TRANSITIONS,
    ) -> None:
        self.conversation_manager = conversation_manager
        self.transitions = transitions

    def is_allowed(self, current: BotState, requested: BotState) -> bool:
        allowed = self.transitions.get(current)
        if allowed is None:
            logger.warning("No transition rules defined for state %s", current.value)
            return False
        return requested in allowed

    async def validate_and_transition(
        self,
        operator_id: int,
        requested: BotState,
        updates: Mapping[str, Any] | None = None,
        ttl: timedelta | None = None,
    ) -> ConversationState:
        """Advance the current workflow, keeping its payload."""
        await self._ensure_allowed(operator_id, requested)
        return await self.conversation_manager.transition_to(operator_id, requested, updates=updates, ttl=ttl)

    async def validate_and_start(
        self,
        operator_id: int,
        requested: BotState,
        initial: Mapping[str, Any] | None = None,
        ttl: timedelta | None = None,
    ) -> ConversationState:
        """Begin a new workflow instance with a fresh payload."""
        await self._ensure_allowed(operator_id, requested)
        return await self.conversation_manager.transition_to_with_clear(
            operator_id,
            requested,
            initial=initial,
            ttl=ttl,
        )

    async def _ensure_allowed(self, operator_id: int, requested: BotState) -> None:
        current = await self.conversation_manager.get_current_tag(operator_id)
        if not self.is_allowed(current, requested):
            logger.warning(
                "Transition not allowed: %s -> %s for operator %s",
                current.value,
                requested.value,
                operator_id,
            )
            raise StateConflictError(operator_id=operator_id, current=current, requested=requested)
