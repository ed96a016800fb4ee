"""Bot service entrypoint that wires the conversation engine and delegates to MessageRouter."""

from __future__ import annotations

from datetime import timedelta

from adminbot.handlers.ban import BanHandler
from adminbot.handlers.invite import InviteHandler
from adminbot.handlers.navigation import NavigationHandler
from adminbot.handlers.search import SearchHandler
from adminbot.interfaces.account_client import AccountClient
from adminbot.interfaces.audit_log import AuditLogWriter
from adminbot.interfaces.invite_issuer import InviteIssuer
from adminbot.interfaces.privilege_lookup import PrivilegeLookup
from adminbot.interfaces.state_store import StateStore
from adminbot.schemas.events import BotReply, InboundEvent
from adminbot.services.conversation_manager import DEFAULT_STATE_TTL, ConversationManager
from adminbot.services.message_router import MessageRouter
from adminbot.services.text_dispatcher import TextDispatcher
from adminbot.services.transition_validator import TransitionValidator


class BotService:
    """Thin facade that forwards inbound events to MessageRouter."""

    def __init__(
        self,
        state_store: StateStore,
        account_client: AccountClient,
        audit_log: AuditLogWriter,
        privilege_lookup: PrivilegeLookup,
        invite_issuer: InviteIssuer,
        *,
        state_ttl: timedelta = DEFAULT_STATE_TTL,
        confirmation_ttl: timedelta | None = None,
        search_page_size: int = 5,
        bot_username: str = "admin_bot",
        invite_ttl_hours: int = 24,
    ) -> None:
        self.state_store = state_store
        self.account_client = account_client
        self.conversation_manager = ConversationManager(store=state_store, default_ttl=state_ttl)
        self.transition_validator = TransitionValidator(self.conversation_manager)

        self.search_handler = SearchHandler(
            self.conversation_manager,
            self.transition_validator,
            account_client=account_client,
            audit_log=audit_log,
            page_size=search_page_size,
        )
        self.ban_handler = BanHandler(
            self.conversation_manager,
            self.transition_validator,
            account_client=account_client,
            audit_log=audit_log,
            confirmation_ttl=confirmation_ttl,
        )
        self.invite_handler = InviteHandler(
            self.conversation_manager,
            self.transition_validator,
            privilege_lookup=privilege_lookup,
            invite_issuer=invite_issuer,
            audit_log=audit_log,
            bot_username=bot_username,
            invite_ttl_hours=invite_ttl_hours,
            confirmation_ttl=confirmation_ttl,
        )
        self.navigation_handler = NavigationHandler(
            self.conversation_manager,
            invite_handler=self.invite_handler,
        )

        self.message_router = MessageRouter(
            handlers=[
                self.navigation_handler,
                self.search_handler,
                self.ban_handler,
                self.invite_handler,
            ],
            text_dispatcher=TextDispatcher(
                self.conversation_manager,
                search_handler=self.search_handler,
                ban_handler=self.ban_handler,
            ),
            conversation_manager=self.conversation_manager,
        )

    async def handle_event(self, event: InboundEvent) -> BotReply:
        """Receive one inbound event and route it through MessageRouter."""
        return await self.message_router.route_event(event)

    async def close(self) -> None:
        """Release the state store and account client connections."""
        try:
            await self.account_client.close()
        finally:
            await self.state_store.close()
