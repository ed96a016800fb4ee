"""State-indexed routing of free-text messages."""

from __future__ import annotations

import logging

from adminbot.handlers.ban import BanHandler
from adminbot.handlers.search import SearchHandler
from adminbot.schemas.events import BotReply, InboundEvent
from adminbot.services import keyboards, messages
from adminbot.services.conversation_manager import ConversationManager
from adminbot.services.conversation_state import BotState

logger = logging.getLogger(__name__)

# Steps that only advance through buttons.
BUTTON_ONLY_STATES = frozenset(
    {
        BotState.SHOWING_SEARCH_RESULTS,
        BotState.AWAITING_ADMIN_ROLE,
        BotState.CONFIRMING_ADMIN_CREATION,
        BotState.CONFIRMING_BAN,
    }
)


class TextDispatcher:
    """Free text carries no callback namespace, so it is routed by the current state tag."""

    def __init__(
        self,
        conversation_manager: ConversationManager,
        search_handler: SearchHandler,
        ban_handler: BanHandler,
    ) -> None:
        self.conversation_manager = conversation_manager
        self.search_handler = search_handler
        self.ban_handler = ban_handler

    async def dispatch(self, event: InboundEvent, operator_id: int) -> BotReply:
        current = await self.conversation_manager.get_current_tag(operator_id)
        text = event.text or ""
        logger.debug("Dispatching free text for operator %s in state %s", operator_id, current.value)

        if current == BotState.IDLE:
            return BotReply(text=messages.HELP, keyboard=keyboards.main_menu_keyboard())
        if current == BotState.AWAITING_SEARCH_QUERY:
            return await self.search_handler.process_query(event, operator_id, text)
        if current == BotState.AWAITING_BAN_REASON:
            return await self.ban_handler.process_reason(event, operator_id, text)
        if current in BUTTON_ONLY_STATES:
            return BotReply(text=messages.USE_BUTTONS)

        logger.warning("No text route for state %s (operator=%s)", current.value, operator_id)
        return BotReply(text=messages.UNKNOWN_STATE)
