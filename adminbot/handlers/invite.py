"""Administrator invitations bounded by the initiator's privilege tier."""

from __future__ import annotations

import logging
from datetime import timedelta

from adminbot.core.constants import (
    AUDIT_ACTIVATE_INVITE,
    AUDIT_GENERATE_INVITE_LINK,
    AUDIT_UNAUTHORIZED_ADDADMIN_ATTEMPT,
    INVITE_DEEP_LINK_PREFIX,
)
from adminbot.core.exceptions import (
    AlreadyAdminError,
    InsufficientPrivilegeError,
    InvalidInvitationError,
    StateConflictError,
)
from adminbot.handlers.base import WorkflowHandler
from adminbot.interfaces.audit_log import AuditLogWriter
from adminbot.interfaces.invite_issuer import InviteIssuer
from adminbot.interfaces.privilege_lookup import PrivilegeLookup
from adminbot.models.admin import AdminRole
from adminbot.schemas.events import BotReply, EventKind, InboundEvent
from adminbot.services import keyboards, messages
from adminbot.services.conversation_manager import ConversationManager
from adminbot.services.conversation_state import BotState
from adminbot.services.state_views import InviteView
from adminbot.services.transition_validator import TransitionValidator

logger = logging.getLogger(__name__)


class InviteHandler(WorkflowHandler):
    """AWAITING_ADMIN_ROLE -> CONFIRMING_ADMIN_CREATION -> IDLE.

    Only SUPER_ADMIN may open the workflow, and the initiator's role is looked
    up again at every step so a demotion mid-flow cannot mint a higher role.
    The invitation token goes to durable storage and into the reply only;
    it is never written to conversation state.
    """

    commands = frozenset({"addadmin"})
    namespaces = frozenset({"add_admin"})
    owned_states = frozenset({BotState.AWAITING_ADMIN_ROLE, BotState.CONFIRMING_ADMIN_CREATION})
    cancel_text = messages.ADMIN_INVITE_CANCELLED

    def __init__(
        self,
        conversation_manager: ConversationManager,
        transition_validator: TransitionValidator,
        privilege_lookup: PrivilegeLookup,
        invite_issuer: InviteIssuer,
        audit_log: AuditLogWriter,
        bot_username: str,
        invite_ttl_hours: int = 24,
        confirmation_ttl: timedelta | None = None,
    ) -> None:
        super().__init__(conversation_manager, transition_validator)
        self.privilege_lookup = privilege_lookup
        self.invite_issuer = invite_issuer
        self.audit_log = audit_log
        self.bot_username = bot_username
        self.invite_ttl_hours = invite_ttl_hours
        self.confirmation_ttl = confirmation_ttl

    async def handle(self, event: InboundEvent, operator_id: int) -> BotReply:
        if event.kind is EventKind.COMMAND:
            return await self.start(event, operator_id)

        parts = (event.action or "").split(":")
        action = parts[1] if len(parts) > 1 else ""
        if action == "cancel":
            return await self.cancel(event, operator_id)
        if action == "role" and len(parts) == 3:
            return await self.select_role(event, operator_id, parts[2])
        if action == "confirm":
            return await self.confirm(event, operator_id)

        logger.warning("Unknown add_admin action %r (operator=%s)", event.action, operator_id)
        return self.reply(event, messages.UNKNOWN_ACTION)

    async def start(self, event: InboundEvent, operator_id: int) -> BotReply:
        own_role = await self.privilege_lookup.get_role(operator_id)
        if own_role is not AdminRole.SUPER_ADMIN:
            logger.warning("Unauthorized attempt to use /addadmin: operator=%s", operator_id)
            await self.audit_log.log_action(AUDIT_UNAUTHORIZED_ADDADMIN_ATTEMPT, operator_id)
            return self.reply(event, messages.ADMIN_SUPER_ONLY)

        args = event.command_args()
        if args:
            return await self._issue_one_shot(event, operator_id, own_role, args[0])

        await self.transition_validator.validate_and_start(operator_id, BotState.AWAITING_ADMIN_ROLE)
        logger.info("Operator %s initiated /addadmin, awaiting role", operator_id)
        return self.reply(
            event,
            messages.ADMIN_SELECT_ROLE,
            keyboards.role_selection_keyboard(own_role.assignable_roles()),
        )

    async def select_role(self, event: InboundEvent, operator_id: int, role_name: str) -> BotReply:
        state = await self.load_owned_state(operator_id, BotState.AWAITING_ADMIN_ROLE)
        if state is None:
            return self.stale_reply(event)

        try:
            role = await self._checked_role(operator_id, role_name)
        except ValueError:
            await self.conversation_manager.reset_to_idle(operator_id)
            return self.reply(event, messages.ADMIN_INVALID_ROLE)
        except InsufficientPrivilegeError as exc:
            await self.conversation_manager.reset_to_idle(operator_id)
            return self.reply(event, str(exc))

        await self.transition_validator.validate_and_transition(
            operator_id,
            BotState.CONFIRMING_ADMIN_CREATION,
            updates=InviteView(role=role).to_payload(),
            ttl=self.confirmation_ttl,
        )
        return self.reply(
            event,
            messages.ADMIN_CONFIRM.format(role=role.name, hours=self.invite_ttl_hours),
            keyboards.confirmation_keyboard("add_admin:confirm", "add_admin:cancel"),
        )

    async def confirm(self, event: InboundEvent, operator_id: int) -> BotReply:
        state = await self.load_owned_state(operator_id, BotState.CONFIRMING_ADMIN_CREATION)
        if state is None:
            return self.stale_reply(event)

        try:
            view = InviteView.from_state(state)
            role = await self._checked_role(operator_id, view.role.name)
            return await self._issue(event, operator_id, role)
        except InsufficientPrivilegeError as exc:
            return self.reply(event, str(exc))
        finally:
            await self.conversation_manager.reset_to_idle(operator_id)

    async def activate(self, event: InboundEvent, operator_id: int, token: str) -> BotReply:
        """Redeem an invite deep link for the sending operator; conversation state is untouched."""
        try:
            role = await self.invite_issuer.activate_invitation(
                token,
                operator_id,
                username=event.username,
                first_name=event.first_name,
            )
        except AlreadyAdminError:
            logger.warning("Registered operator %s tried to redeem an invite", operator_id)
            return self.reply(event, messages.INVITE_ALREADY_ADMIN)
        except InvalidInvitationError:
            logger.warning("Invalid invite token %s... (operator=%s)", token[:6], operator_id)
            return self.reply(event, messages.INVITE_INVALID)

        await self.audit_log.log_action(AUDIT_ACTIVATE_INVITE, operator_id, details={"role": role.name})
        logger.info("Operator %s registered as %s via invite", operator_id, role.name)
        return self.reply(
            event,
            messages.INVITE_ACTIVATED.format(role=role.name),
            keyboards.main_menu_keyboard(),
        )

    async def _issue_one_shot(
        self,
        event: InboundEvent,
        operator_id: int,
        own_role: AdminRole,
        role_name: str,
    ) -> BotReply:
        current = await self.conversation_manager.get_current_tag(operator_id)
        if not self.transition_validator.is_allowed(current, BotState.AWAITING_ADMIN_ROLE):
            raise StateConflictError(operator_id, current, BotState.AWAITING_ADMIN_ROLE)

        try:
            role = AdminRole.from_name(role_name)
        except ValueError:
            return self.reply(event, messages.ADMIN_INVALID_ROLE)
        if not own_role.can_assign(role):
            return self.reply(event, messages.ADMIN_ROLE_TOO_HIGH.format(role=role.name, own=own_role.name))

        try:
            return await self._issue(event, operator_id, role)
        finally:
            await self.conversation_manager.reset_to_idle(operator_id)

    async def _checked_role(self, operator_id: int, role_name: str) -> AdminRole:
        """Parse the requested role and check it is strictly below the operator's own."""
        role = AdminRole.from_name(role_name)
        own_role = await self.privilege_lookup.get_role(operator_id)
        if own_role is None or not own_role.can_assign(role):
            own_name = own_role.name if own_role is not None else "—"
            logger.warning(
                "Operator %s (%s) tried to assign higher or equal role %s",
                operator_id,
                own_name,
                role.name,
            )
            raise InsufficientPrivilegeError(messages.ADMIN_ROLE_TOO_HIGH.format(role=role.name, own=own_name))
        return role

    async def _issue(self, event: InboundEvent, operator_id: int, role: AdminRole) -> BotReply:
        token = await self.invite_issuer.create_invitation(operator_id, role)
        link = f"https://t.me/{self.bot_username}?start={INVITE_DEEP_LINK_PREFIX}{token}"
        await self.audit_log.log_action(AUDIT_GENERATE_INVITE_LINK, operator_id, details={"role": role.name})
        logger.info("Generated invite link: operator=%s role=%s", operator_id, role.name)
        return self.reply(
            event,
            messages.ADMIN_INVITE_CREATED.format(role=role.name, hours=self.invite_ttl_hours, link=link),
        )
