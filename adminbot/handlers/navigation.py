"""Stateless commands and buttons: start, help, cancel, main menu."""

from __future__ import annotations

import logging

from adminbot.core.constants import INVITE_DEEP_LINK_PREFIX
from adminbot.handlers.base import EventHandler
from adminbot.handlers.invite import InviteHandler
from adminbot.schemas.events import BotReply, EventKind, InboundEvent
from adminbot.services import keyboards, messages
from adminbot.services.conversation_manager import ConversationManager

logger = logging.getLogger(__name__)


class NavigationHandler(EventHandler):
    """`/start invite_<token>` is handed to the invite workflow for redemption."""

    commands = frozenset({"start", "help", "cancel"})
    namespaces = frozenset({"noop", "main_menu"})

    def __init__(
        self,
        conversation_manager: ConversationManager,
        invite_handler: InviteHandler | None = None,
    ) -> None:
        self.conversation_manager = conversation_manager
        self.invite_handler = invite_handler

    async def handle(self, event: InboundEvent, operator_id: int) -> BotReply:
        if event.kind is EventKind.CALLBACK_ACTION:
            if event.action == "noop":
                return BotReply.silent()
            await self.conversation_manager.reset_to_idle(operator_id)
            return self.reply(event, messages.MAIN_MENU, keyboards.main_menu_keyboard())

        keyword = event.command_keyword()
        if keyword == "cancel":
            await self.conversation_manager.reset_to_idle(operator_id)
            logger.info("Operator %s cancelled the current action", operator_id)
            return self.reply(event, messages.CANCELLED)

        args = event.command_args()
        if keyword == "start" and args and args[0].startswith(INVITE_DEEP_LINK_PREFIX):
            if self.invite_handler is None:
                logger.warning("Invite link received but redemption is not configured")
                return self.reply(event, messages.INVITE_INVALID)
            token = args[0][len(INVITE_DEEP_LINK_PREFIX):]
            return await self.invite_handler.activate(event, operator_id, token)
        return self.reply(event, messages.HELP, keyboards.main_menu_keyboard())
