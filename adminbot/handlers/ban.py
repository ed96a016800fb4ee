"""Ban workflow (reason + confirmation) and stateless unban."""

from __future__ import annotations

import logging
from datetime import timedelta
from html import escape
from uuid import UUID

from adminbot.core.constants import (
    AUDIT_BLOCK_USER,
    AUDIT_UNBLOCK_USER,
    BAN_REASONS,
    MAX_BAN_REASON_LENGTH,
    MIN_BAN_REASON_LENGTH,
)
from adminbot.core.exceptions import AccountNotFoundError, PayloadValueError
from adminbot.handlers.base import WorkflowHandler
from adminbot.interfaces.account_client import AccountClient
from adminbot.interfaces.audit_log import AuditLogWriter
from adminbot.schemas.accounts import AccountDto
from adminbot.schemas.events import BotReply, EventKind, InboundEvent
from adminbot.services import keyboards, messages
from adminbot.services.conversation_manager import ConversationManager
from adminbot.services.conversation_state import BotState
from adminbot.services.state_views import BAN_REASON, BanView
from adminbot.services.transition_validator import TransitionValidator

logger = logging.getLogger(__name__)


class BanHandler(WorkflowHandler):
    """AWAITING_BAN_REASON -> CONFIRMING_BAN -> IDLE, plus one-step unblocking."""

    commands = frozenset({"ban", "unban"})
    namespaces = frozenset(
        {
            "block",
            "unblock",
            "ban_reason",
            "ban_confirm",
            "ban_cancel",
            "search_ban",
            "search_unban",
        }
    )
    owned_states = frozenset({BotState.AWAITING_BAN_REASON, BotState.CONFIRMING_BAN})
    cancel_text = messages.BAN_CANCELLED

    def __init__(
        self,
        conversation_manager: ConversationManager,
        transition_validator: TransitionValidator,
        account_client: AccountClient,
        audit_log: AuditLogWriter,
        confirmation_ttl: timedelta | None = None,
    ) -> None:
        super().__init__(conversation_manager, transition_validator)
        self.account_client = account_client
        self.audit_log = audit_log
        self.confirmation_ttl = confirmation_ttl

    async def handle(self, event: InboundEvent, operator_id: int) -> BotReply:
        if event.kind is EventKind.COMMAND:
            if event.command_keyword() == "unban":
                return await self.unban_command(event, operator_id)
            return await self.start(event, operator_id)

        namespace, _, argument = (event.action or "").partition(":")
        if namespace in ("block", "search_ban"):
            return await self.start_for_target(event, operator_id, argument)
        if namespace == "ban_reason":
            return await self.select_reason(event, operator_id, argument)
        if namespace == "ban_confirm":
            return await self.confirm(event, operator_id)
        if namespace == "ban_cancel":
            return await self.cancel(event, operator_id)
        if namespace == "unblock":
            return await self.unblock(event, operator_id, argument)
        if namespace == "search_unban":
            return await self.unblock(event, operator_id, argument, reset_after=True)
        return self.reply(event, messages.UNKNOWN_ACTION)

    async def start(self, event: InboundEvent, operator_id: int) -> BotReply:
        """Open the reason prompt, or go straight to confirmation when a reason is inline."""
        args = event.command_args()
        if not args:
            return self.reply(event, messages.BAN_USAGE)

        opened = await self.start_for_target(event, operator_id, args[0])
        if len(args) == 1:
            return opened

        state = await self.conversation_manager.get_state(operator_id)
        if state.state != BotState.AWAITING_BAN_REASON:
            # Target was rejected; the reply already says why.
            return opened
        return await self.process_reason(event, operator_id, " ".join(args[1:]))

    async def start_for_target(self, event: InboundEvent, operator_id: int, raw_user_id: str) -> BotReply:
        user_id = _parse_user_id(raw_user_id)
        if user_id is None:
            logger.warning("Invalid ban target %r (operator=%s)", raw_user_id, operator_id)
            return self.reply(event, messages.INVALID_USER_ID)

        try:
            account = await self.account_client.get_account(user_id)
        except AccountNotFoundError:
            logger.warning("Ban target %s not found (operator=%s)", user_id, operator_id)
            return self.reply(event, messages.USER_NOT_FOUND)
        if account.is_blocked:
            return self.reply(event, messages.BAN_ALREADY_BLOCKED)

        view = BanView(target_user_id=account.id, target_email=account.email or "")
        await self.transition_validator.validate_and_start(
            operator_id,
            BotState.AWAITING_BAN_REASON,
            initial=view.to_payload(),
        )
        logger.info("Ban process started for user %s by operator %s", user_id, operator_id)
        return self.reply(
            event,
            messages.BAN_TARGET.format(email=_email(account), user_id=account.id),
            keyboards.ban_reasons_keyboard(),
        )

    async def select_reason(self, event: InboundEvent, operator_id: int, code: str) -> BotReply:
        state = await self.load_owned_state(operator_id, BotState.AWAITING_BAN_REASON)
        if state is None:
            return self.stale_reply(event)

        reason = BAN_REASONS.get(code)
        if reason is None:
            logger.warning("Unknown ban reason code %r (operator=%s)", code, operator_id)
            return self.reply(event, messages.UNKNOWN_ACTION)
        return await self._record_reason(event, operator_id, BanView.from_state(state), reason)

    async def process_reason(self, event: InboundEvent, operator_id: int, text: str) -> BotReply:
        """Free-text reason typed while AWAITING_BAN_REASON."""
        state = await self.load_owned_state(operator_id, BotState.AWAITING_BAN_REASON)
        if state is None:
            return self.stale_reply(event)

        reason = text.strip()
        if not MIN_BAN_REASON_LENGTH <= len(reason) <= MAX_BAN_REASON_LENGTH:
            logger.warning("Ban reason of %s chars rejected (operator=%s)", len(reason), operator_id)
            return self.reply(event, messages.BAN_REASON_LIMIT)
        return await self._record_reason(event, operator_id, BanView.from_state(state), reason)

    async def _record_reason(
        self,
        event: InboundEvent,
        operator_id: int,
        view: BanView,
        reason: str,
    ) -> BotReply:
        await self.transition_validator.validate_and_transition(
            operator_id,
            BotState.CONFIRMING_BAN,
            updates={BAN_REASON: reason},
            ttl=self.confirmation_ttl,
        )
        logger.info("Ban reason recorded for user %s (operator=%s)", view.target_user_id, operator_id)
        return self.reply(
            event,
            messages.BAN_CONFIRM.format(
                email=escape(view.target_email or "—"),
                user_id=view.target_user_id,
                reason=escape(reason),
            ),
            keyboards.confirmation_keyboard("ban_confirm", "ban_cancel"),
        )

    async def confirm(self, event: InboundEvent, operator_id: int) -> BotReply:
        state = await self.load_owned_state(operator_id, BotState.CONFIRMING_BAN)
        if state is None:
            return self.stale_reply(event)

        view = BanView.from_state(state)
        if view.reason is None:
            raise PayloadValueError("Ban confirmation reached without a reason.")

        await self.account_client.block_account(view.target_user_id)
        await self.audit_log.log_action(
            AUDIT_BLOCK_USER,
            operator_id,
            view.target_user_id,
            {"reason": view.reason, "email": view.target_email},
        )
        await self.conversation_manager.reset_to_idle(operator_id)
        logger.info("User %s blocked by operator %s", view.target_user_id, operator_id)
        return self.reply(
            event,
            messages.BAN_DONE.format(email=escape(view.target_email or "—"), reason=escape(view.reason)),
            keyboards.main_menu_keyboard(),
        )

    async def unban_command(self, event: InboundEvent, operator_id: int) -> BotReply:
        args = event.command_args()
        if not args:
            return self.reply(event, messages.UNBAN_USAGE)
        return await self.unblock(event, operator_id, args[0])

    async def unblock(
        self,
        event: InboundEvent,
        operator_id: int,
        raw_user_id: str,
        reset_after: bool = False,
    ) -> BotReply:
        """Unblock needs no confirmation and never opens a workflow."""
        user_id = _parse_user_id(raw_user_id)
        if user_id is None:
            return self.reply(event, messages.INVALID_USER_ID)

        try:
            account = await self.account_client.get_account(user_id)
        except AccountNotFoundError:
            return self.reply(event, messages.USER_NOT_FOUND)
        if not account.is_blocked:
            return self.reply(event, messages.BAN_NOT_BLOCKED)

        await self.account_client.unblock_account(user_id)
        await self.audit_log.log_action(AUDIT_UNBLOCK_USER, operator_id, user_id, {"email": account.email})
        if reset_after:
            await self.conversation_manager.reset_to_idle(operator_id)
        logger.info("User %s unblocked by operator %s", user_id, operator_id)
        return self.reply(
            event,
            messages.UNBAN_DONE.format(email=_email(account)),
            keyboards.main_menu_keyboard(),
        )


def _parse_user_id(raw: str) -> UUID | None:
    try:
        return UUID(raw.strip())
    except ValueError:
        return None


def _email(account: AccountDto) -> str:
    return escape(account.email or "—")
