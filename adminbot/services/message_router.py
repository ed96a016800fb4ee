"""Inbound event routing layer for the admin bot."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from adminbot.core.exceptions import StateConflictError
from adminbot.handlers.base import EventHandler
from adminbot.schemas.events import BotReply, EventKind, InboundEvent
from adminbot.services import messages
from adminbot.services.conversation_manager import ConversationManager
from adminbot.services.text_dispatcher import TextDispatcher

logger = logging.getLogger(__name__)


class MessageRouter:
    """Dispatches each event to the first handler that claims its signature.

    Handler order is fixed at construction. Free text bypasses the handler
    list and goes to the TextDispatcher.
    """

    def __init__(
        self,
        handlers: Sequence[EventHandler],
        text_dispatcher: TextDispatcher,
        conversation_manager: ConversationManager,
    ) -> None:
        self.handlers = tuple(handlers)
        self.text_dispatcher = text_dispatcher
        self.conversation_manager = conversation_manager

    async def route_event(self, event: InboundEvent) -> BotReply:
        """Route one inbound event; never raises for handler failures."""
        operator_id = event.operator_id
        is_callback = event.kind is EventKind.CALLBACK_ACTION
        try:
            if event.kind is EventKind.FREE_TEXT:
                return await self.text_dispatcher.dispatch(event, operator_id)

            signature = self.resolve_signature(event)
            handler = self.find_handler(signature)
            if handler is None:
                logger.warning("No handler for %r (operator=%s)", signature, operator_id)
                return BotReply(text=messages.UNKNOWN_ACTION, is_edit=is_callback)

            logger.debug("Routing %r to %s (operator=%s)", signature, type(handler).__name__, operator_id)
            return await handler.handle(event, operator_id)
        except StateConflictError as exc:
            # Rejected before any write: the operator's state is left as it was.
            logger.warning("Stale workflow step: %s", exc)
            return BotReply(text=messages.STALE_WORKFLOW, is_edit=is_callback)
        except Exception:
            logger.exception("Error handling %s event for operator %s", event.kind.value, operator_id)
            await self._force_idle(operator_id)
            return BotReply(text=messages.GENERIC_ERROR, is_edit=is_callback)

    def resolve_signature(self, event: InboundEvent) -> str:
        if event.kind is EventKind.COMMAND:
            return f"/{event.command_keyword()}"
        return event.action or ""

    def find_handler(self, signature: str) -> EventHandler | None:
        for handler in self.handlers:
            if handler.can_handle(signature):
                return handler
        return None

    async def _force_idle(self, operator_id: int) -> None:
        try:
            await self.conversation_manager.reset_to_idle(operator_id)
        except Exception:
            logger.exception("Could not reset operator %s to IDLE after failure", operator_id)
