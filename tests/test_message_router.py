"""Unit tests for MessageRouter dispatch and fail-safe behavior."""

from __future__ import annotations

import unittest
from typing import Any
from unittest.mock import AsyncMock

from adminbot.core.exceptions import CollaboratorError, StateConflictError
from adminbot.handlers.base import EventHandler
from adminbot.providers.accounts.mock_accounts import MockAccountClient
from adminbot.providers.state_stores.memory_store import InMemoryStateStore
from adminbot.providers.state_stores.redis_store import RedisStateStore
from adminbot.schemas.events import BotReply, EventKind, InboundEvent
from adminbot.services import messages
from adminbot.services.bot_service import BotService
from adminbot.services.conversation_manager import ConversationManager
from adminbot.services.conversation_state import BotState, ConversationState
from adminbot.services.message_router import MessageRouter


class StubHandler(EventHandler):
    """Handler test double with configurable claims that records calls."""

    def __init__(
        self,
        name: str,
        *,
        commands: set[str] | None = None,
        namespaces: set[str] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.name = name
        self.commands = frozenset(commands or ())
        self.namespaces = frozenset(namespaces or ())
        self.error = error
        self.calls: list[tuple[InboundEvent, int]] = []

    async def handle(self, event: InboundEvent, operator_id: int) -> BotReply:
        self.calls.append((event, operator_id))
        if self.error is not None:
            raise self.error
        return BotReply(text=self.name)


class StubTextDispatcher:
    """Text dispatcher test double that records free-text events."""

    def __init__(self) -> None:
        self.calls: list[InboundEvent] = []

    async def dispatch(self, event: InboundEvent, operator_id: int) -> BotReply:
        del operator_id
        self.calls.append(event)
        return BotReply(text="[TEXT]")


class FailingResetManager(ConversationManager):
    """ConversationManager whose reset fails, as when the store is down."""

    async def reset_to_idle(self, operator_id: int) -> Any:
        raise ConnectionError("redis down")


class StubAuditLog:
    async def log_action(self, *args: Any, **kwargs: Any) -> None:
        del args, kwargs


class StubPrivilegeLookup:
    async def get_role(self, operator_id: int) -> None:
        del operator_id
        return None


class StubInviteIssuer:
    async def create_invitation(self, created_by: int, role: Any) -> str:
        del created_by, role
        return "token"


def _command(text: str, operator_id: int = 10) -> InboundEvent:
    return InboundEvent(operator_id=operator_id, kind=EventKind.COMMAND, text=text)


def _callback(action: str, operator_id: int = 10) -> InboundEvent:
    return InboundEvent(operator_id=operator_id, kind=EventKind.CALLBACK_ACTION, action=action)


class MessageRouterTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.store = InMemoryStateStore()
        self.manager = ConversationManager(store=self.store)
        self.text_dispatcher = StubTextDispatcher()

    def _router(self, *handlers: EventHandler, manager: ConversationManager | None = None) -> MessageRouter:
        return MessageRouter(
            handlers=list(handlers),
            text_dispatcher=self.text_dispatcher,
            conversation_manager=manager or self.manager,
        )

    async def test_first_matching_handler_wins(self) -> None:
        first = StubHandler("first", namespaces={"search_page"})
        second = StubHandler("second", namespaces={"search_page"})
        router = self._router(first, second)

        reply = await router.route_event(_callback("search_page:2"))

        self.assertEqual(reply.text, "first")
        self.assertEqual(len(first.calls), 1)
        self.assertEqual(second.calls, [])

    async def test_command_signature_ignores_bot_suffix_and_case(self) -> None:
        handler = StubHandler("search", commands={"search"})
        router = self._router(handler)

        reply = await router.route_event(_command("/Search@admin_bot jo@x.io"))

        self.assertEqual(reply.text, "search")
        self.assertEqual(router.resolve_signature(_command("/Search@admin_bot")), "/search")

    async def test_namespace_match_is_exact(self) -> None:
        router = self._router(StubHandler("ban", namespaces={"ban"}))

        self.assertIsNone(router.find_handler("ban_reason:spam"))
        self.assertIsNotNone(router.find_handler("ban:123"))
        self.assertIsNone(router.find_handler("/ban"))

    async def test_unknown_signature_returns_unknown_action(self) -> None:
        router = self._router(StubHandler("search", commands={"search"}))

        reply = await router.route_event(_callback("does_not_exist:1"))

        self.assertEqual(reply.text, messages.UNKNOWN_ACTION)
        self.assertTrue(reply.is_edit)

    async def test_free_text_goes_to_text_dispatcher(self) -> None:
        handler = StubHandler("any", commands={"search"}, namespaces={"search_page"})
        router = self._router(handler)

        reply = await router.route_event(
            InboundEvent(operator_id=10, kind=EventKind.FREE_TEXT, text="jo@x.io")
        )

        self.assertEqual(reply.text, "[TEXT]")
        self.assertEqual(handler.calls, [])
        self.assertEqual(len(self.text_dispatcher.calls), 1)

    async def test_handler_failure_forces_idle_and_returns_generic_error(self) -> None:
        await self.manager.transition_to_with_clear(
            10,
            BotState.CONFIRMING_BAN,
            initial={"banReason": "Спам"},
        )
        router = self._router(StubHandler("ban", namespaces={"ban_confirm"}, error=CollaboratorError("503")))

        with self.assertLogs("adminbot.services.message_router", level="ERROR"):
            reply = await router.route_event(_callback("ban_confirm"))

        state = await self.manager.get_state(10)
        self.assertEqual(reply.text, messages.GENERIC_ERROR)
        self.assertTrue(state.is_idle)
        self.assertEqual(state.payload, {})

    async def test_state_conflict_keeps_state(self) -> None:
        await self.manager.transition_to_with_clear(10, BotState.AWAITING_SEARCH_QUERY)
        conflict = StateConflictError(10, BotState.AWAITING_SEARCH_QUERY, BotState.AWAITING_BAN_REASON)
        router = self._router(StubHandler("ban", commands={"ban"}, error=conflict))

        reply = await router.route_event(_command("/ban 123"))

        self.assertEqual(reply.text, messages.STALE_WORKFLOW)
        self.assertFalse(reply.is_edit)
        self.assertEqual(await self.manager.get_current_tag(10), BotState.AWAITING_SEARCH_QUERY)

    async def test_failed_reset_still_returns_generic_error(self) -> None:
        manager = FailingResetManager(store=self.store)
        router = self._router(StubHandler("boom", commands={"boom"}, error=RuntimeError("boom")), manager=manager)

        with self.assertLogs("adminbot.services.message_router", level="ERROR") as logs:
            reply = await router.route_event(_command("/boom"))

        self.assertEqual(reply.text, messages.GENERIC_ERROR)
        self.assertEqual(len(logs.records), 2)


class UndecodableStoredStateTestCase(unittest.IsolatedAsyncioTestCase):
    """A Redis document that no longer decodes is treated as a failure and replaced by IDLE."""

    async def asyncSetUp(self) -> None:
        self.client = AsyncMock()
        self.client.get.return_value = '{"state": "SHOWING_SEARCH_RESULTS", "payload": '
        self.service = BotService(
            state_store=RedisStateStore(client=self.client),
            account_client=MockAccountClient(),
            audit_log=StubAuditLog(),
            privilege_lookup=StubPrivilegeLookup(),
            invite_issuer=StubInviteIssuer(),
        )

    async def test_router_resets_operator_to_idle(self) -> None:
        with self.assertLogs("adminbot.services.message_router", level="ERROR"):
            reply = await self.service.handle_event(_callback("search_page:1", operator_id=42))

        self.assertEqual(reply.text, messages.GENERIC_ERROR)
        self.assertTrue(reply.is_edit)
        key, document = self.client.set.await_args.args
        written = ConversationState.from_json(document)
        self.assertEqual(key, "telegram:state:42")
        self.assertTrue(written.is_idle)
        self.assertEqual(written.payload, {})


class HandlerRegistryTestCase(unittest.TestCase):
    """The production handler list must never claim a signature twice."""

    def setUp(self) -> None:
        self.service = BotService(
            state_store=InMemoryStateStore(),
            account_client=MockAccountClient(),
            audit_log=StubAuditLog(),
            privilege_lookup=StubPrivilegeLookup(),
            invite_issuer=StubInviteIssuer(),
        )
        self.handlers = self.service.message_router.handlers

    def test_commands_do_not_overlap(self) -> None:
        seen: set[str] = set()
        for handler in self.handlers:
            self.assertFalse(seen & handler.commands, type(handler).__name__)
            seen |= handler.commands

    def test_namespaces_do_not_overlap(self) -> None:
        seen: set[str] = set()
        for handler in self.handlers:
            self.assertFalse(seen & handler.namespaces, type(handler).__name__)
            seen |= handler.namespaces

    def test_every_keyboard_namespace_is_claimed(self) -> None:
        router = self.service.message_router
        for action in (
            "search_page:1",
            "search_view:x",
            "search_new",
            "search_cancel",
            "search_ban:x",
            "search_unban:x",
            "block:x",
            "unblock:x",
            "ban_reason:spam",
            "ban_confirm",
            "ban_cancel",
            "add_admin:role:ADMIN",
            "add_admin:confirm",
            "add_admin:cancel",
            "noop",
            "main_menu",
        ):
            with self.subTest(action=action):
                self.assertIsNotNone(router.find_handler(action))

    def test_user_and_start_commands_are_claimed(self) -> None:
        router = self.service.message_router

        self.assertIs(router.find_handler("/user"), self.service.search_handler)
        self.assertIs(router.find_handler("/start"), self.service.navigation_handler)


if __name__ == "__main__":
    unittest.main()
