"""Unit tests for ConversationState payload entries and workflow views."""

from __future__ import annotations

import unittest
from uuid import uuid4

from adminbot.core.exceptions import PayloadValueError
from adminbot.models.admin import AdminRole
from adminbot.services.conversation_state import (
    BoolValue,
    BotState,
    ConversationState,
    FloatValue,
    IntValue,
    StrValue,
    payload_value,
)
from adminbot.services.state_views import BAN_TARGET_USER_ID, BanView, InviteView, SearchView


class PayloadValueTestCase(unittest.TestCase):
    def test_scalars_map_to_their_variant(self) -> None:
        self.assertIsInstance(payload_value("jo@x.io"), StrValue)
        self.assertIsInstance(payload_value(3), IntValue)
        self.assertIsInstance(payload_value(2.5), FloatValue)
        self.assertIsInstance(payload_value(False), BoolValue)

    def test_bool_is_not_stored_as_int(self) -> None:
        entry = payload_value(True)

        self.assertEqual(entry.kind, "bool")
        with self.assertRaises(PayloadValueError):
            entry.as_int()

    def test_unsupported_type_is_rejected(self) -> None:
        with self.assertRaises(PayloadValueError):
            payload_value(["not", "a", "scalar"])

    def test_conversions(self) -> None:
        self.assertEqual(payload_value(7).as_float(), 7.0)
        self.assertEqual(payload_value(4.0).as_int(), 4)
        self.assertEqual(payload_value(True).as_str(), "true")
        self.assertEqual(payload_value(12).as_str(), "12")

    def test_invalid_conversions_raise_payload_error(self) -> None:
        with self.assertRaises(PayloadValueError):
            payload_value("3").as_int()
        with self.assertRaises(PayloadValueError):
            payload_value(1.5).as_int()
        with self.assertRaises(PayloadValueError):
            payload_value(1).as_bool()


class ConversationStateTestCase(unittest.TestCase):
    def test_idle_defaults(self) -> None:
        state = ConversationState.idle()

        self.assertTrue(state.is_idle)
        self.assertEqual(state.payload, {})
        self.assertEqual(state.version, 0)
        self.assertIsNone(state.created_at)

    def test_json_round_trip_keeps_payload_types(self) -> None:
        state = ConversationState(state=BotState.SHOWING_SEARCH_RESULTS)
        state.put("query", "jo@x.io")
        state.put("page", 2)
        state.put("ratio", 0.5)
        state.put("flag", True)
        state.increment_version()

        restored = ConversationState.from_json(state.to_json())

        self.assertEqual(restored, state)
        self.assertIsInstance(restored.require("page"), IntValue)
        self.assertIsInstance(restored.require("flag"), BoolValue)

    def test_require_missing_key_raises(self) -> None:
        state = ConversationState(state=BotState.CONFIRMING_BAN)

        with self.assertRaises(PayloadValueError):
            state.require("banReason")
        self.assertIsNone(state.get("banReason"))

    def test_clear_payload(self) -> None:
        state = ConversationState(state=BotState.AWAITING_BAN_REASON)
        state.put("targetEmail", "jo@x.io")

        state.clear_payload()

        self.assertEqual(state.payload, {})


class StateViewsTestCase(unittest.TestCase):
    def test_search_view_round_trip(self) -> None:
        view = SearchView(query="jo@x.io", current_page=1, total_pages=3, total_results=12)
        state = ConversationState(state=BotState.SHOWING_SEARCH_RESULTS)
        for key, value in view.to_payload().items():
            state.put(key, value)

        self.assertEqual(SearchView.from_state(state), view)

    def test_ban_view_without_reason(self) -> None:
        target = uuid4()
        state = ConversationState(state=BotState.AWAITING_BAN_REASON)
        for key, value in BanView(target_user_id=target, target_email="jo@x.io").to_payload().items():
            state.put(key, value)

        view = BanView.from_state(state)

        self.assertEqual(view.target_user_id, target)
        self.assertIsNone(view.reason)

    def test_ban_view_rejects_corrupt_target(self) -> None:
        state = ConversationState(state=BotState.AWAITING_BAN_REASON)
        state.put(BAN_TARGET_USER_ID, "not-a-uuid")
        state.put("targetEmail", "jo@x.io")

        with self.assertRaises(PayloadValueError):
            BanView.from_state(state)

    def test_invite_view_rejects_unknown_role(self) -> None:
        state = ConversationState(state=BotState.CONFIRMING_ADMIN_CREATION)
        state.put("inviteAdminRole", "OWNER")

        with self.assertRaises(PayloadValueError):
            InviteView.from_state(state)

    def test_invite_view_round_trip(self) -> None:
        state = ConversationState(state=BotState.CONFIRMING_ADMIN_CREATION)
        for key, value in InviteView(role=AdminRole.MODERATOR).to_payload().items():
            state.put(key, value)

        self.assertIs(InviteView.from_state(state).role, AdminRole.MODERATOR)


if __name__ == "__main__":
    unittest.main()
