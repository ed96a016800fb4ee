"""Shared shape of event handlers and multi-step workflows."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import ClassVar

from adminbot.schemas.events import BotReply, EventKind, InboundEvent, KeyboardButton
from adminbot.services import messages
from adminbot.services.conversation_manager import ConversationManager
from adminbot.services.conversation_state import BotState, ConversationState
from adminbot.services.transition_validator import TransitionValidator

logger = logging.getLogger(__name__)


class EventHandler(ABC):
    """Claims commands and callback namespaces and answers events for them.

    A signature is either "/keyword" for commands or the raw callback action,
    whose first colon-separated segment is the namespace.
    """

    commands: ClassVar[frozenset[str]] = frozenset()
    namespaces: ClassVar[frozenset[str]] = frozenset()

    def can_handle(self, signature: str) -> bool:
        if signature.startswith("/"):
            return signature[1:] in self.commands
        return signature.split(":", 1)[0] in self.namespaces

    @abstractmethod
    async def handle(self, event: InboundEvent, operator_id: int) -> BotReply:
        """Produce the reply for an event this handler claimed."""
        raise NotImplementedError

    def reply(
        self,
        event: InboundEvent,
        text: str,
        keyboard: list[list[KeyboardButton]] | None = None,
    ) -> BotReply:
        """Button taps edit the message they came from; everything else sends a new one."""
        return BotReply(text=text, keyboard=keyboard, is_edit=event.kind is EventKind.CALLBACK_ACTION)


class WorkflowHandler(EventHandler):
    """Multi-step feature layered on the operator's conversation state."""

    owned_states: ClassVar[frozenset[BotState]] = frozenset()
    cancel_text: ClassVar[str] = messages.CANCELLED

    def __init__(
        self,
        conversation_manager: ConversationManager,
        transition_validator: TransitionValidator,
    ) -> None:
        self.conversation_manager = conversation_manager
        self.transition_validator = transition_validator

    @abstractmethod
    async def start(self, event: InboundEvent, operator_id: int) -> BotReply:
        """Begin a workflow instance, or run it at once when all arguments are inline."""
        raise NotImplementedError

    async def cancel(self, event: InboundEvent, operator_id: int) -> BotReply:
        await self.conversation_manager.reset_to_idle(operator_id)
        logger.info("Operator %s cancelled %s", operator_id, type(self).__name__)
        return self.reply(event, self.cancel_text)

    async def load_owned_state(
        self,
        operator_id: int,
        expected: BotState,
    ) -> ConversationState | None:
        """Return the state if the operator is at the expected step, else None."""
        state = await self.conversation_manager.get_state(operator_id)
        if state.state != expected:
            logger.warning(
                "Operator %s is in %s, %s expected %s",
                operator_id,
                state.state.value,
                type(self).__name__,
                expected.value,
            )
            return None
        return state

    def stale_reply(self, event: InboundEvent) -> BotReply:
        return self.reply(event, messages.STALE_WORKFLOW)
