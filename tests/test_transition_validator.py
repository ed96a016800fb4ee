"""Unit tests for the transition table and TransitionValidator."""

from __future__ import annotations

import unittest
from types import MappingProxyType

from adminbot.core.exceptions import StateConflictError
from adminbot.providers.state_stores.memory_store import InMemoryStateStore
from adminbot.services.conversation_manager import ConversationManager
from adminbot.services.conversation_state import BotState
from adminbot.services.transition_validator import ALLOWED_TRANSITIONS, TransitionValidator


class TransitionTableTestCase(unittest.TestCase):
    def test_every_state_has_an_entry(self) -> None:
        self.assertEqual(set(ALLOWED_TRANSITIONS), set(BotState))

    def test_every_workflow_state_can_return_to_idle(self) -> None:
        for tag in BotState:
            if tag == BotState.IDLE:
                continue
            with self.subTest(tag=tag):
                self.assertIn(BotState.IDLE, ALLOWED_TRANSITIONS[tag])

    def test_only_search_results_self_transition(self) -> None:
        self_loops = {tag for tag, targets in ALLOWED_TRANSITIONS.items() if tag in targets}

        self.assertEqual(self_loops, {BotState.SHOWING_SEARCH_RESULTS})

    def test_every_non_idle_state_is_reachable_from_idle(self) -> None:
        reached = {BotState.IDLE}
        frontier = [BotState.IDLE]
        while frontier:
            for target in ALLOWED_TRANSITIONS[frontier.pop()]:
                if target not in reached:
                    reached.add(target)
                    frontier.append(target)

        self.assertEqual(reached, set(BotState))

    def test_confirmation_steps_only_lead_back_to_idle(self) -> None:
        self.assertEqual(ALLOWED_TRANSITIONS[BotState.CONFIRMING_BAN], frozenset({BotState.IDLE}))
        self.assertEqual(ALLOWED_TRANSITIONS[BotState.CONFIRMING_ADMIN_CREATION], frozenset({BotState.IDLE}))

    def test_table_is_read_only(self) -> None:
        with self.assertRaises(TypeError):
            ALLOWED_TRANSITIONS[BotState.IDLE] = frozenset()  # type: ignore[index]


class TransitionValidatorTestCase(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.store = InMemoryStateStore()
        self.manager = ConversationManager(store=self.store)
        self.validator = TransitionValidator(self.manager)
        self.operator_id = 42

    def test_missing_entry_fails_closed(self) -> None:
        validator = TransitionValidator(
            self.manager,
            transitions=MappingProxyType({BotState.IDLE: frozenset({BotState.AWAITING_SEARCH_QUERY})}),
        )

        with self.assertLogs("adminbot.services.transition_validator", level="WARNING"):
            self.assertFalse(validator.is_allowed(BotState.CONFIRMING_BAN, BotState.IDLE))

    async def test_illegal_transition_leaves_state_untouched(self) -> None:
        await self.validator.validate_and_start(self.operator_id, BotState.AWAITING_SEARCH_QUERY)
        before = await self.manager.get_state(self.operator_id)

        with self.assertRaises(StateConflictError) as ctx:
            await self.validator.validate_and_transition(self.operator_id, BotState.CONFIRMING_BAN)

        after = await self.manager.get_state(self.operator_id)
        self.assertEqual(after, before)
        self.assertIs(ctx.exception.current, BotState.AWAITING_SEARCH_QUERY)
        self.assertIs(ctx.exception.requested, BotState.CONFIRMING_BAN)
        self.assertIn(str(self.operator_id), str(ctx.exception))

    async def test_transition_keeps_payload_and_applies_updates_in_one_write(self) -> None:
        await self.validator.validate_and_start(
            self.operator_id,
            BotState.AWAITING_BAN_REASON,
            initial={"targetEmail": "jo@x.io"},
        )

        state = await self.validator.validate_and_transition(
            self.operator_id,
            BotState.CONFIRMING_BAN,
            updates={"banReason": "Спам"},
        )

        self.assertIs(state.state, BotState.CONFIRMING_BAN)
        self.assertEqual(state.version, 1)
        self.assertEqual(state.require("targetEmail").as_str(), "jo@x.io")
        self.assertEqual(state.require("banReason").as_str(), "Спам")

    async def test_start_replaces_stale_payload(self) -> None:
        await self.validator.validate_and_start(
            self.operator_id,
            BotState.SHOWING_SEARCH_RESULTS,
            initial={"searchQuery": "jo@x.io"},
        )

        state = await self.validator.validate_and_start(
            self.operator_id,
            BotState.AWAITING_BAN_REASON,
            initial={"targetEmail": "jo@x.io"},
        )

        self.assertEqual(set(state.payload), {"targetEmail"})
        self.assertEqual(state.version, 0)

    async def test_reset_is_always_legal(self) -> None:
        await self.validator.validate_and_start(self.operator_id, BotState.AWAITING_ADMIN_ROLE)
        await self.validator.validate_and_transition(self.operator_id, BotState.CONFIRMING_ADMIN_CREATION)

        state = await self.manager.reset_to_idle(self.operator_id)

        self.assertTrue(state.is_idle)


if __name__ == "__main__":
    unittest.main()
